"""
Settings are read from Django's ``settings`` object if the project has
configured it, either by calling ``settings.configure()`` or by naming a
settings module in ``DJANGO_SETTINGS_MODULE``. The codec is usable without
Django settings as well, in which case the defaults below apply.

    XMLRPC_ENCODING     encoding of generated documents ('utf-8')
    XMLRPC_HUGE_TREE    lift lxml's parser limits on deep/large trees (False)
    DEBUG               include error details in generated faults (False)
"""
import os

from django.conf import ENVIRONMENT_VARIABLE, settings

DEFAULTS = {
    'XMLRPC_ENCODING': 'utf-8',
    'XMLRPC_HUGE_TREE': False,
    'DEBUG': False,
}

def get_setting(name, default=None):
    if default is None:
        default = DEFAULTS.get(name)
    # settings are lazy, and only count as configured once touched
    if not settings.configured and not os.environ.get(ENVIRONMENT_VARIABLE):
        return default
    return getattr(settings, name, default)
