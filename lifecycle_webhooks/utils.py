"""
Utilities shared by the webhook views, the tasks, and the GitHub client.
"""

import functools
import hmac
import time
from time import sleep as retry_sleep   # patched in tests.

import cachetools.func
import sentry_sdk
from flask import jsonify, request, Response, url_for

from lifecycle_webhooks import logger, settings


def requires_auth(view):
    """Only let the operator, by HTTP basic auth, use `view`."""
    @functools.wraps(view)
    def _protected(*args, **kwargs):
        auth = request.authorization
        if auth and _is_operator(auth.username, auth.password):
            return view(*args, **kwargs)
        return Response(
            "Operator credentials are needed for this URL.\n", 401,
            {"WWW-Authenticate": 'Basic realm="lifecycle-webhooks"'},
        )
    return _protected


def _is_operator(username, password) -> bool:
    expected_username = settings.HTTP_BASIC_AUTH_USERNAME
    expected_password = settings.HTTP_BASIC_AUTH_PASSWORD
    if not expected_username or not expected_password:
        return False
    return (
        hmac.compare_digest((username or "").encode(), expected_username.encode())
        and hmac.compare_digest((password or "").encode(), expected_password.encode())
    )


def is_valid_payload(secret: str, signature: str, payload: bytes) -> bool:
    """
    Was `payload` signed by GitHub with our shared `secret`?

    `signature` is the value of the X-Hub-Signature-256 header ("sha256=...")
    or of the older X-Hub-Signature header ("sha1=...").
    """
    if not secret or not signature:
        return False
    algorithm, _, digest = signature.partition("=")
    if algorithm not in ("sha256", "sha1"):
        return False
    expected = hmac.new(secret.encode(), msg=payload, digestmod=algorithm).hexdigest()
    return hmac.compare_digest(expected.encode(), digest.encode())


class RequestFailed(Exception):
    """GitHub didn't do what we asked."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code

    def __reduce__(self):
        # Celery pickles task exceptions into the result backend.
        return (self.__class__, (str(self), self.status_code))


def check_response(response) -> None:
    """Log a GitHub request and its response, and raise RequestFailed if it failed."""
    req = response.request
    logger.debug(f"GitHub request: {req.method} {req.url}: {req.body!r}")
    logger.debug(f"GitHub response: {response.status_code} {response.reason!r}: {response.content!r}")
    if not response.ok:
        raise RequestFailed(
            f"GitHub request failed: {req.method} {req.url}: "
            + f"{response.status_code} {text_summary(response.text, 200)}",
            status_code=response.status_code,
        )


def text_summary(text, length=40):
    """Shorten `text` to `length` chars by eliding the middle."""
    if len(text) <= length:
        return text
    head = (length - 3) // 2
    tail = length - 3 - head
    return f"{text[:head]}...{text[-tail:]}"


def retry_get(session, url, tries=10, pause=0.5):
    """
    GET `url` from GitHub, trying again while the answer is 404.

    A comment GitHub just told us about, or the issue it's on, can be a 404
    for a short while.  The last response is returned whatever it is.
    """
    for attempt in range(1, tries + 1):
        resp = session.get(url)
        if resp.status_code != 404 or attempt == tries:
            break
        logger.debug(f"404 for {url}, attempt {attempt} of {tries}")
        retry_sleep(pause)
    return resp


# Memoized functions, for clear_memoized_values.
_memoized_functions = []

def memoize(func):
    """Remember what `func` returns for the life of the process."""
    func = functools.lru_cache()(func)
    _memoized_functions.append(func)
    return func

def memoize_timed(minutes):
    """Remember what the decorated function returns for `minutes` minutes."""
    def _timed(func):
        # A fresh reference to time.time on each call, so freezegun can patch it.
        func = cachetools.func.ttl_cache(ttl=60 * minutes, timer=lambda: time.time())(func)
        _memoized_functions.append(func)
        return func
    return _timed

def clear_memoized_values():
    """Forget everything @memoize and @memoize_timed remembered. Tests need this."""
    for func in _memoized_functions:
        func.cache_clear()


# The parts of a webhook request a task needs to rebuild its request context.
_TASK_ENVIRON_KEYS = {
    "HTTP_HOST", "SERVER_NAME", "SERVER_PORT", "REQUEST_METHOD",
    "SCRIPT_NAME", "PATH_INFO", "QUERY_STRING", "wsgi.url_scheme",
}

def queue_task(task, *args, **kwargs):
    """
    Send `task` to Celery and make the 202 response for the webhook.

    The response body and Location header point at the task's status view.
    """
    wsgi_environ = {k: v for k, v in request.environ.items() if k in _TASK_ENVIRON_KEYS}
    result = task.delay(*args, wsgi_environ=wsgi_environ, **kwargs)
    status_url = url_for("tasks.status", task_id=result.id, _external=True)
    logger.info(f"Queued {task.name}, status at {status_url}")
    resp = jsonify({"message": "queued", "status_url": status_url})
    resp.status_code = 202
    resp.headers["Location"] = status_url
    return resp


def sentry_extra_context(data_dict):
    """Attach the keys and values of `data_dict` to Sentry reports."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
