from copy import copy
import logging
import os
import sys


def running_in_github_actions() -> bool:
    return os.environ.get('GITHUB_ACTIONS') == 'true'


class WorkflowFormatter(logging.Formatter):
    '''
    colours level-names if writing to a tty. If running in GitHub-Actions, warnings and errors
    are additionally prefixed w/ the matching workflow-command, so they are shown as annotations
    of the workflow-run.
    '''
    level_colors = {
        logging.DEBUG: lambda level_name:
        f'{Bcolors.BOLD}{Bcolors.BLUE}{level_name}{Bcolors.RESET_ALL}',
        logging.INFO: lambda level_name:
        f'{Bcolors.BOLD}{Bcolors.GREEN}{level_name}{Bcolors.RESET_ALL}',
        logging.WARNING: lambda level_name:
        f'{Bcolors.BOLD}{Bcolors.YELLOW}{level_name}{Bcolors.RESET_ALL}',
        logging.ERROR: lambda level_name:
        f'{Bcolors.BOLD}{Bcolors.RED}{level_name}{Bcolors.RESET_ALL}',
    }

    def __init__(self, *args, stream=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.stream = stream or sys.stderr

    def color_level_name(self, level_name, level_number):
        def default(level_name):
            return str(level_name)

        func = self.level_colors.get(level_number, default)
        return func(level_name)

    def workflow_command(self, level_number) -> str:
        if level_number >= logging.ERROR:
            return '::error::'
        if level_number >= logging.WARNING:
            return '::warning::'
        return ''

    def formatMessage(self, record):
        record_copy = copy(record)
        levelname = record_copy.levelname
        if self.stream.isatty():
            levelname = self.color_level_name(levelname, record_copy.levelno)
        record_copy.__dict__['levelprefix'] = levelname
        formatted = super().formatMessage(record_copy)

        if running_in_github_actions():
            formatted = f'{self.workflow_command(record_copy.levelno)}{formatted}'

        return formatted


class Bcolors:
    RESET_ALL = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


def configure_default_logging(
    stdout_level=None,
    force=True,
    stream=None,
    custom_format_string: str = '',
):
    '''
    installs a single handler on the root-logger. Log-output is written to stderr by default, as
    stdout is reserved for results (which are typically captured by calling workflow-steps).
    '''
    if not stdout_level:
        stdout_level = logging.INFO
    stream = stream or sys.stderr

    # make sure to have a clean root logger (in case setup is called multiple times)
    if force:
        handlers = logging.root.handlers
        for h in handlers:
            logging.root.removeHandler(h)
            h.close()

    sh = logging.StreamHandler(stream=stream)
    sh.setLevel(stdout_level)

    fmt = custom_format_string or default_fmt_string()
    sh.setFormatter(WorkflowFormatter(fmt=fmt, stream=stream))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # too verbose
    logging.getLogger('github3').setLevel(logging.WARNING)


def default_fmt_string():
    return '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'
