from prefixbot.commands import (
    ActionFailed,
    CollaboratorUnavailable,
    MissingArgument,
    sanitize_error_message,
    user_message_for,
)
from prefixbot.commands.errors import MAX_ERROR_LENGTH


class TestSanitize:
    def test_posix_path(self):
        assert sanitize_error_message(OSError("cannot open /etc/bot/config.json")) == "cannot open [path]"

    def test_windows_path(self):
        message = sanitize_error_message(OSError("cannot open C:\\Users\\bot\\app.py"))
        assert "Users" not in message
        assert "[path]" in message

    def test_windows_path_with_spaces(self):
        message = sanitize_error_message(OSError(r"cannot open C:\Users\John Smith\secrets\creds.json"))
        assert message == "cannot open [path]"

    def test_secret_assignment(self):
        message = sanitize_error_message(RuntimeError("login failed: password=hunter2 api_key: sk-1"))
        assert "hunter2" not in message
        assert "sk-1" not in message
        assert "password=[redacted]" in message

    def test_bearer_token(self):
        assert sanitize_error_message(RuntimeError("sent Bearer abc.def")) == "sent Bearer [redacted]"

    def test_long_token(self):
        message = sanitize_error_message(RuntimeError("bad token " + "A" * 60))
        assert "A" * 60 not in message
        assert "[redacted]" in message

    def test_stack_frames_removed(self):
        error = RuntimeError(
            "Traceback (most recent call last):\n"
            '  File "/app/bot.py", line 3, in main\n'
            "ValueError: bad"
        )
        assert sanitize_error_message(error) == "ValueError: bad"

    def test_length_is_bounded(self):
        message = sanitize_error_message(RuntimeError("x " * 300))
        assert len(message) == MAX_ERROR_LENGTH + 3
        assert message.endswith("...")

    def test_non_exception(self):
        assert sanitize_error_message(None) == "An unexpected error occurred."

    def test_empty_message(self):
        assert sanitize_error_message(RuntimeError("")) == "An error occurred while processing your request."


class TestUserMessage:
    def test_collaborator(self):
        message = user_message_for(CollaboratorUnavailable("player stats", "HTTP 503 at /v2/account"))
        assert message == "⚠️ The player stats feature is currently unavailable. Please try again later."

    def test_action_failed_passes_through(self):
        assert user_message_for(ActionFailed("I don't have permission to do that.")) == (
            "❌ I don't have permission to do that."
        )

    def test_argument_error(self):
        assert user_message_for(MissingArgument("user")) == "❌ Missing required argument: user"

    def test_unexpected_error_is_scrubbed(self):
        message = user_message_for(KeyError("token=abc123"))
        assert message.startswith("❌ Error: ")
        assert "abc123" not in message
