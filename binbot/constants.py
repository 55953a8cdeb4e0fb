"""Constants and default values for binbot."""

# Default model configuration
DEFAULT_MODEL = "anthropic:claude-haiku-4-5"

# Sampling temperature for intent and image interpretation
INTERPRET_TEMPERATURE = 0.2

DEFAULT_LOG_DIR = ".binbot"

# Demo bins a fresh session starts with
SEED_CONTAINERS = [
    (1, ["Christmas Decorations", "Wreaths", "Tree Stand"]),
    (2, ["Camping Gear", "Tent", "Sleeping Bags"]),
]

WELCOME_MESSAGE = (
    "Welcome to your Container Assistant! How can I help you today? "
    "You can say things like 'What's in container 1?' or "
    "'Add winter clothes to a new container'."
)

# Transcript texts produced by the controller
LOADING_TEXT = "..."
UNKNOWN_RESPONSE = "I'm sorry, I didn't quite understand that. Could you please rephrase?"
TURN_ERROR_TEXT = "An error occurred. Please try again."
SCAN_ERROR_TEXT = "An error occurred while scanning the image."

# Model descriptors - Anthropic Claude models only
SUPPORTED_MODELS = {
    # Claude Haiku 4.5 - Fast and cost-effective
    "anthropic:claude-haiku-4-5": {
        "provider": "anthropic",
        "name": "claude-haiku-4-5-20251001",
        "max_output_tokens": 1024,
    },
    # Claude Sonnet 4.5 - Stronger vision and instruction following
    "anthropic:claude-sonnet-4-5": {
        "provider": "anthropic",
        "name": "claude-sonnet-4-5-20250929",
        "max_output_tokens": 1024,
    },
    # Claude Opus 4.1 - Most capable for complex reasoning
    "anthropic:claude-opus-4-1": {
        "provider": "anthropic",
        "name": "claude-opus-4-1-20250805",
        "max_output_tokens": 1024,
    },
}
