"""Texts shown to users by the authentication dialogs of a viewer."""

from collections.abc import Callable

from archival_access.core.access.identity import (
    is_authentication_enabled,
    is_external_enabled,
    is_ip_access_enabled,
    is_login_enabled,
)
from archival_access.models.item import Item
from archival_access.services.descriptor import ServiceContext

AuthTexts = dict[str, dict[str, str]]

LOGOUT = {
    "label": "Logout",
}

LOGIN = {
    "label": "Login with code to gain access",
    "header": "Login with code to gain access",
    "description": "You are required to login with a code to see this item.",
    "confirmLabel": "Login with code",
    "failureHeader": "Authentication failed",
    "failureDescription": "The code is not valid!",
}

EXTERNAL = {
    "label": "Access",
    "header": "Access",
    "failureHeader": "Access restricted",
    "failureDescription": "Unfortunately access to this record is restricted.",
}


def auth_texts_hook(context: ServiceContext) -> Callable[[Item], AuthTexts]:
    settings = context.settings

    def get_auth_texts(item: Item) -> AuthTexts:
        texts: AuthTexts = {}
        if not is_authentication_enabled(settings):
            return texts

        if is_login_enabled(settings):
            texts["logout"] = dict(LOGOUT)
            texts["login"] = dict(LOGIN)

        if is_external_enabled(settings) or is_ip_access_enabled(settings):
            texts["external"] = dict(EXTERNAL)

        return texts

    return get_auth_texts
