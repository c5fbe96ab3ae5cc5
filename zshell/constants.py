# zshell/constants.py
# Shared constants to avoid circular imports between cli.py and log_toggle.py
import os

from dotenv import load_dotenv

# Pull a local .env into the environment before anything below is read.
DOTENV_LOADED = load_dotenv()

# Label shown in the prompt: "[12:00:00.000/SHELL] >>"
SHELL_LABEL = "SHELL"

# Fixed file the backtick toggle redirects diagnostic logging into.
LOG_FILE = os.getenv("ZSHELL_LOG_FILE", "z.log")

# Line history persisted across sessions (prompt_toolkit FileHistory format).
HISTORY_FILE = os.getenv("ZSHELL_HISTORY_FILE", "history.txt")

# Terminal-friendly default; set LOG_LEVEL=DEBUG (or use -v) for chatter.
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Key that flips the logging sink while a line is being composed.
TOGGLE_KEY = "`"
