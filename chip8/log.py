# Trace logging. Off by default; switch on with --log or F1 in the window.

logs_on = False


def set_logging(enabled):
    global logs_on
    logs_on = bool(enabled)


def log(*args):
    if logs_on:
        print(*args)


def toggle_logging():
    set_logging(not logs_on)
    return logs_on
