"""
Project-level views for EduZone
Health check, CSRF cookie, JSON session login/logout and JSON error handlers
"""
import logging

from django.contrib.auth import authenticate, login as auth_login, logout
from django.middleware.csrf import get_token
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from teacher_app.api import api_view, fail, ok, read_json

logger = logging.getLogger(__name__)


@require_GET
def health(request):
    return ok({'status': 'ok'})


def _role(user):
    """Portal a user belongs to, based on the profile attached to it"""
    if user.is_staff:
        return 'admin'
    if hasattr(user, 'teacher'):
        return 'teacher'
    if hasattr(user, 'student'):
        return 'student'
    return None


@require_POST
@api_view
def loginView(request):
    """
    Authenticate with username/password and open a Django session
    Only users attached to a portal (admin, teacher, student) may log in
    """
    data = read_json(request)
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        return fail('Please provide both username and password.', status=400, code='validation_error')

    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.warning(f'Failed login attempt for username: {username}')
        return fail('Invalid username or password.', status=401, code='unauthenticated')

    role = _role(user)
    if role is None:
        return fail('This account has no portal access.', status=403, code='forbidden')

    auth_login(request, user)
    logger.info(f'User {username} logged in as {role}')
    return ok({'username': user.username, 'role': role}, 'Logged in')


@require_GET
@ensure_csrf_cookie
def csrfView(request):
    """
    Issue the csrftoken cookie. JSON clients echo it back in the
    X-CSRFToken header on every POST, login included.
    """
    return ok({'csrfToken': get_token(request)}, 'CSRF cookie set')


@require_POST
def logoutView(request):
    request.session.flush()
    logout(request)
    return ok(None, 'Logged out')


# Global JSON error handlers (wired as handler400/403/404/500 in urls.py).

def error_400(request, exception=None):
    return fail('Bad request.', status=400, code='bad_request')


def error_403(request, exception=None):
    return fail('Forbidden.', status=403, code='forbidden')


def error_404(request, exception=None):
    return fail('Not found.', status=404, code='not_found')


def error_500(request):
    return fail('Internal server error.', status=500, code='server_error')


def csrf_failure(request, reason=''):
    logger.warning(f'CSRF check failed for {request.method} {request.path}: {reason}')
    return fail('CSRF verification failed. Fetch /auth/csrf/ and send the X-CSRFToken header.', status=403, code='csrf_failed')
