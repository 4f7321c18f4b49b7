"""Process exit codes (sysexits.h conventions, plus 130 for SIGINT)."""

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_DATA_ERROR = 65
EXIT_UNAVAILABLE = 69
EXIT_IO_ERROR = 74
# 128 + SIGINT
EXIT_INTERRUPTED = 130
