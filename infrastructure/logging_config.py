"""
Logging configuration for the approval bot.

Console output plus size-rotating log files, with a dedicated file for the
admission/decision workflow so that every state change can be audited.
"""

import logging
import logging.handlers
import os
import shutil
from datetime import datetime

WORKFLOW_LOGGERS = (
    'AdmissionController',
    'WorkflowEngine',
    'DecisionDispatcher',
    'RecordStore',
)

COMPONENT_LOGGERS = WORKFLOW_LOGGERS + (
    'OperatorAlerts',
    'TelegramOperatorSink',
    'SmtpEmailSink',
    'CallbackHandler',
    'SubmissionAPI',
    'ErrorHandler',
    'BotApplication',
)


def _clear_previous_logs(log_dir: str) -> None:
    if not os.path.exists(log_dir):
        return
    for filename in os.listdir(log_dir):
        file_path = os.path.join(log_dir, filename)
        try:
            if os.path.isfile(file_path) or os.path.islink(file_path):
                os.unlink(file_path)
            elif os.path.isdir(file_path):
                shutil.rmtree(file_path)
        except OSError as exc:
            print(f'Failed to delete {file_path}. Reason: {exc}')


def setup_logging(log_dir: str, production_mode: bool = False) -> None:
    """
    Set up logging with console and rotating file handlers.

    Previous logs in ``log_dir`` are cleared so each run starts with a fresh
    ``latest_log`` directory.

    Args:
        log_dir: Directory receiving the log files
        production_mode: When True only warnings and errors reach the console
            and the main log; the workflow log still records INFO.
    """
    _clear_previous_logs(log_dir)
    os.makedirs(log_dir, exist_ok=True)

    main_log_file = os.path.join(log_dir, 'bot.log')
    debug_log_file = os.path.join(log_dir, 'bot_debug.log')
    error_log_file = os.path.join(log_dir, 'bot_errors.log')
    workflow_log_file = os.path.join(log_dir, 'workflow.log')

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING if production_mode else logging.DEBUG)
    root_logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d in %(funcName)s()] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING if production_mode else logging.INFO)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    main_file_handler = logging.handlers.RotatingFileHandler(
        main_log_file,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    main_file_handler.setLevel(logging.WARNING if production_mode else logging.INFO)
    main_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(main_file_handler)

    if not production_mode:
        debug_file_handler = logging.handlers.RotatingFileHandler(
            debug_log_file,
            maxBytes=50*1024*1024,  # 50MB
            backupCount=3,
            encoding='utf-8'
        )
        debug_file_handler.setLevel(logging.DEBUG)
        debug_file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(debug_file_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        error_log_file,
        maxBytes=5*1024*1024,  # 5MB
        backupCount=5,
        encoding='utf-8'
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_file_handler)

    workflow_handler = logging.handlers.RotatingFileHandler(
        workflow_log_file,
        maxBytes=20*1024*1024,  # 20MB
        backupCount=5,
        encoding='utf-8'
    )
    workflow_handler.setLevel(logging.INFO if production_mode else logging.DEBUG)
    workflow_handler.setFormatter(detailed_formatter)
    for name in WORKFLOW_LOGGERS:
        logging.getLogger(name).addHandler(workflow_handler)

    component_level = logging.INFO if production_mode else logging.DEBUG
    for name in COMPONENT_LOGGERS:
        logging.getLogger(name).setLevel(component_level)

    # Reduce noise from external libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('telegram').setLevel(logging.INFO)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    root_logger.info("="*80)
    root_logger.info(f"Approval bot logging initialized - {datetime.now()}")
    root_logger.info(f"Production Mode: {'ON' if production_mode else 'OFF'}")
    root_logger.info(f"Main log: {main_log_file}")
    if not production_mode:
        root_logger.info(f"Debug log: {debug_log_file}")
    root_logger.info(f"Error log: {error_log_file}")
    root_logger.info(f"Workflow log: {workflow_log_file}")
    root_logger.info("="*80)

