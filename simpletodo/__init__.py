"""simpletodo: a personal to-do list API with WIP limits, proactive prompts and celebrations."""

__version__ = "0.1.0"
