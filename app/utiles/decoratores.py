# app/utiles/decoratores.py
import inspect
from functools import wraps
from fastapi import HTTPException
from pymongo.errors import PyMongoError
from app.utiles.logger import get_logger

logger = get_logger(__name__)


def _to_http_error(func_name: str, exc: Exception) -> HTTPException:
    """Map an unexpected exception to the 500 the client sees."""
    if isinstance(exc, PyMongoError):
        logger.exception("Store error in %s - %s", func_name, exc)
    else:
        logger.exception("Exception in function: %s - %s", func_name, exc)
    return HTTPException(status_code=500, detail="Internal Server Error")


def handle_exceptions(func):
    """
    Route decorator: logs entry/exit, lets HTTPExceptions (validation, not found,
    unavailable) through untouched and turns everything else into a 500.
    """
    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                logger.info("Calling function: %s", func.__name__)
                result = await func(*args, **kwargs)
                logger.info("Function %s completed successfully", func.__name__)
                return result
            except HTTPException as he:
                logger.warning("HTTPException in %s: %s", func.__name__, he.detail)
                raise
            except Exception as e:
                raise _to_http_error(func.__name__, e) from e
        return wrapper
    else:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                logger.info("Calling function: %s", func.__name__)
                result = func(*args, **kwargs)
                logger.info("Function %s completed successfully", func.__name__)
                return result
            except HTTPException as he:
                logger.warning("HTTPException in %s: %s", func.__name__, he.detail)
                raise
            except Exception as e:
                raise _to_http_error(func.__name__, e) from e
        return wrapper
