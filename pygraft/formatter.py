from pygraft.exceptions import (
    ClassifiedError,
    ExecutionError,
    OperationError,
)


DEFAULT_STATUS_CODE = 500


def format_error(error):
    """
    Shape an error for the response envelope

    Errors raised by a resolver become `{message, statusCode, detail}`,
    `statusCode` defaulting to 500 for unclassified errors. Errors the
    engine raised itself keep their plain located form.
    """
    if isinstance(error, OperationError):
        return {'message': str(error), 'locations': None, 'path': None}
    if not isinstance(error, ExecutionError):
        return format_original_error(error)
    if error.original_error is None:
        return error.formatted
    return format_original_error(error.original_error)


def format_original_error(original):
    if isinstance(original, ClassifiedError):
        status_code, detail = original.status_code, original.detail
    else:
        status_code, detail = None, None
    return {
        'message': str(original) or 'An error occurred.',
        'statusCode': status_code or DEFAULT_STATUS_CODE,
        'detail': detail
    }
