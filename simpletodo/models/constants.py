"""Constants for simpletodo.

This module centralizes all magic numbers and default values used throughout the application.
"""

# Task text
MAX_TASK_TEXT_LENGTH = 500

# WIP limit range (inclusive)
MIN_WIP_LIMIT = 5
MAX_WIP_LIMIT = 10

# Prompting frequency range in hours (inclusive)
MIN_PROMPTING_FREQUENCY_HOURS = 1
MAX_PROMPTING_FREQUENCY_HOURS = 6

# Celebration display duration range in seconds (inclusive)
MIN_CELEBRATION_DURATION_SECONDS = 3
MAX_CELEBRATION_DURATION_SECONDS = 10
DEFAULT_CELEBRATION_DISPLAY_MS = 5000

# Prompt scheduling (seconds unless noted)
PROMPT_RANDOM_OFFSET_MINUTES = 15  # interval jitter, +/- this many minutes
PROMPT_MIN_INTERVAL_RATIO = 0.9  # fraction of frequency that must elapse between prompts
PROMPT_RESPONSE_TIMEOUT_SECONDS = 30
PROMPT_SNOOZE_SECONDS = 60 * 60
PROMPT_TASK_COOLDOWN_SECONDS = 24 * 60 * 60
PROMPT_COOLDOWN_CLEANUP_SECONDS = 60 * 60
FIRST_PROMPT_DELAY_SECONDS = 15 * 60
USER_ACTIVITY_WINDOW_SECONDS = 5 * 60

# SSE keep-alive comment interval
SSE_KEEP_ALIVE_SECONDS = 30

# Celebration message rotation memory
RECENT_CELEBRATIONS_TRACKED = 5
