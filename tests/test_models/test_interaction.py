"""Tests for interaction payload parsing."""

from dictbot.models.interaction import Interaction, InteractionResponseType, message_response


def test_invoker_prefers_member_user():
    interaction = Interaction.model_validate(
        {
            "type": 2,
            "data": {"name": "hello"},
            "member": {"user": {"id": "g1", "username": "guildy"}},
            "user": {"id": "d1", "username": "dm"},
        }
    )
    assert interaction.invoker.username == "guildy"


def test_invoker_falls_back_to_user():
    interaction = Interaction.model_validate(
        {"type": 2, "data": {"name": "hello"}, "user": {"id": "d1", "username": "dm"}}
    )
    assert interaction.invoker.id == "d1"


def test_command_name_empty_without_data():
    assert Interaction.model_validate({"type": 2}).command_name == ""


def test_unknown_fields_are_ignored():
    interaction = Interaction.model_validate(
        {"type": 2, "guild_id": "123", "data": {"name": "ping", "options": []}}
    )
    assert interaction.command_name == "ping"


def test_message_response_shape():
    assert message_response("hi") == {
        "type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
        "data": {"content": "hi"},
    }
    assert message_response("hi")["type"] == 4
