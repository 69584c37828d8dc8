# snooker_draft/utils/observability.py
import logging
import os
import sys
from typing import Optional
import structlog
import contextvars

# Correlation ID ties together the log lines of one refresh cycle
CORRELATION_ID = contextvars.ContextVar('correlation_id', default=None)

class ObservabilityConfig:
    """Configuration for the logging stack."""
    
    def __init__(self, environment: Optional[str] = None, log_level: Optional[str] = None, log_format: Optional[str] = None):
        self.environment = environment or os.getenv('ENVIRONMENT', 'development')
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')
        self.log_format = log_format or ('json' if self.environment == 'production' else 'console')

class StructlogConfig:
    """Structured logging configuration."""
    
    @staticmethod
    def configure(log_format: str = 'console', log_level: str = 'INFO'):
        """
        Configure structlog for the chosen output format.
        
        json: JSON output (machine-readable, production default)
        console: Console output (human-readable)
        """
        
        shared_processors = [
            # Add correlation ID to all logs
            structlog.contextvars.merge_contextvars,
            # Add log level
            structlog.processors.add_log_level,
            # Add timestamp
            structlog.processors.TimeStamper(fmt='iso'),
            # Add exception info
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
        ]
        
        if log_format == 'json':
            processors = shared_processors + [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        else:
            processors = shared_processors + [
                structlog.dev.ConsoleRenderer(),
            ]
        
        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(log_level.upper())
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )

class Logger:
    """Wrapper for structured logging with context awareness."""
    
    def __init__(self, module_name: str):
        self.logger = structlog.get_logger(module_name)
        self.module_name = module_name
    
    def with_correlation_id(self, correlation_id: str):
        """Bind correlation ID to all subsequent logs."""
        CORRELATION_ID.set(correlation_id)
        return self.logger.bind(correlation_id=correlation_id)
    
    def log_event(self, event: str, **kwargs):
        """Log structured event with automatic context."""
        corr_id = CORRELATION_ID.get()
        ctx = {'correlation_id': corr_id, 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.info(event, **ctx)
    
    def log_warning(self, event: str, **kwargs):
        """Log a degraded-but-handled condition."""
        corr_id = CORRELATION_ID.get()
        ctx = {'correlation_id': corr_id, 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.warning(event, **ctx)
    
    def log_error(self, event: str, exc_info=None, **kwargs):
        """Log error with exception details."""
        corr_id = CORRELATION_ID.get()
        ctx = {'correlation_id': corr_id, 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.error(event, exc_info=exc_info, **ctx)

def initialize_observability(
    environment: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> ObservabilityConfig:
    """One-stop initialization for logging."""
    config = ObservabilityConfig(environment=environment, log_level=log_level, log_format=log_format)
    StructlogConfig.configure(log_format=config.log_format, log_level=config.log_level)
    
    logger = structlog.get_logger(__name__)
    logger.debug(
        'observability_initialized',
        environment=config.environment,
        log_format=config.log_format,
    )
    
    return config
