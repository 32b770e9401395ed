"""
This module contains the configuration settings for procman.
It defines paths, supervisor timings and logging options.
Values come from the environment first, then from a .env file in the working
directory. The .env file is read without touching os.environ, since host
supervisors import this package.
"""

import os
import pathlib
from dotenv import dotenv_values, find_dotenv

_ENV = {**dotenv_values(find_dotenv(usecwd=True)), **os.environ}


def _getenv(key: str, default=None):
    value = _ENV.get(key)
    return default if value is None else value


#* --- Core Paths ---
BASE_DIR = pathlib.Path(_getenv("PROCMAN_HOME", pathlib.Path.cwd())).resolve()
RUN_DIR = BASE_DIR / "run"
LOGS_DIR = BASE_DIR / "logs"

#* --- Application File Paths ---
PID_FILE_PATH = pathlib.Path(_getenv("PROCMAN_PID_FILE", RUN_DIR / "procman.pid"))
OVERRIDES_JSON_PATH = pathlib.Path(_getenv("PROCMAN_OVERRIDES", RUN_DIR / "overrides.json"))
LOG_FILE_PATH = _getenv("PROCMAN_LOG_FILE", "")  # Empty disables file logging

#* --- Supervisor Settings ---
PROCESS_TITLE = "procman - Supervisor"
SUPERVISOR_SLEEP_INTERVAL = float(_getenv("PROCMAN_SLEEP_INTERVAL", "2"))
GRACEFUL_SHUTDOWN_TIMEOUT = float(_getenv("PROCMAN_SHUTDOWN_TIMEOUT", "10"))  # seconds
SHUTDOWN_POLL_INTERVAL = 0.2

#* --- Logging ---
LOG_LEVEL = _getenv("PROCMAN_LOG_LEVEL", "INFO").upper()
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3

#* --- MODIFIABLE SETTINGS (Changeable at runtime via overrides.json) ---
MODIFIABLE_SETTINGS = {
    "SUPERVISOR_SLEEP_INTERVAL",
    "GRACEFUL_SHUTDOWN_TIMEOUT",
    "SHUTDOWN_POLL_INTERVAL",
    "LOG_LEVEL",
}
