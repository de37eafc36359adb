"""Optional Firebase Admin bootstrap.

The service account key is optional. When it is present the Admin SDK is
initialized and an ``AdminClient`` is handed to the routes; when it is not,
the server still starts and admin-only endpoints answer 503.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import auth, credentials

logger = logging.getLogger("elearning-backend")

DEFAULT_SERVICE_ACCOUNT_PATH = "./serviceAccountKey.json"


# ----------------------
# Serialization
# ----------------------
def _ms_to_utc_string(ms: Optional[int]) -> Optional[str]:
    """RFC 1123 time, e.g. ``Tue, 14 Nov 2023 22:13:20 GMT``."""
    if not ms:
        return None
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return format_datetime(dt, usegmt=True)


def _provider_to_dict(info) -> Dict[str, Any]:
    return {
        "uid": info.uid,
        "displayName": info.display_name,
        "email": info.email,
        "photoURL": info.photo_url,
        "providerId": info.provider_id,
        "phoneNumber": info.phone_number,
    }


def _factor_to_dict(factor) -> Dict[str, Any]:
    data = {
        "uid": factor.uid,
        "displayName": factor.display_name,
        "factorId": factor.factor_id,
        "enrollmentTime": getattr(factor, "enrollment_time", None),
    }
    # Only phone factors carry a number.
    phone = getattr(factor, "phone_number", None)
    if phone is not None:
        data["phoneNumber"] = phone
    return data


def user_record_to_dict(record) -> Dict[str, Any]:
    """JSON shape of a Firebase user record.

    Same keys as the Admin SDK's ``toJSON()`` (camelCase), with record times
    as RFC 1123 UTC strings. Password hash and salt are never included.
    """
    meta = record.user_metadata
    data = {
        "uid": record.uid,
        "email": record.email,
        "emailVerified": record.email_verified,
        "displayName": record.display_name,
        "photoURL": record.photo_url,
        "phoneNumber": record.phone_number,
        "disabled": record.disabled,
        "metadata": {
            "creationTime": _ms_to_utc_string(meta.creation_timestamp),
            "lastSignInTime": _ms_to_utc_string(meta.last_sign_in_timestamp),
            "lastRefreshTime": _ms_to_utc_string(meta.last_refresh_timestamp),
        },
        "customClaims": record.custom_claims,
        "tokensValidAfterTime": _ms_to_utc_string(record.tokens_valid_after_timestamp),
        "tenantId": record.tenant_id,
        "providerData": [_provider_to_dict(p) for p in record.provider_data],
    }
    # Older SDK releases have no multi-factor support on user records.
    multi_factor = getattr(record, "multi_factor", None)
    if multi_factor is not None:
        data["multiFactor"] = {
            "enrolledFactors": [_factor_to_dict(f) for f in multi_factor.enrolled_factors],
        }
    return data


# ----------------------
# Admin client
# ----------------------
class AdminClient:
    """Owns the Firebase app handle; routes only see this wrapper."""

    def __init__(self, app: firebase_admin.App):
        self._app = app

    def list_users(self, max_results: int) -> List[Dict[str, Any]]:
        """Return the first page of users. SDK errors propagate."""
        page = auth.list_users(max_results=max_results, app=self._app)
        return [user_record_to_dict(u) for u in page.users]


@dataclass(frozen=True)
class AdminStatus:
    """Outcome of bootstrap, computed once and never changed."""

    client: Optional[AdminClient] = None
    error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self.client is not None


def _get_or_init_app(cred: credentials.Certificate) -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        return firebase_admin.initialize_app(cred)


def init_admin(path: str = DEFAULT_SERVICE_ACCOUNT_PATH) -> AdminStatus:
    """Try to initialize the Admin SDK from a service account key file.

    Never raises: any failure (missing file, bad JSON, invalid key) is
    logged and returned as ``AdminStatus.error``.
    """
    try:
        cred = credentials.Certificate(path)
        app = _get_or_init_app(cred)
    except Exception as e:
        logger.warning(
            "Firebase Admin SDK NOT initialized. Download serviceAccountKey.json "
            "to enable Firebase features."
        )
        logger.warning("Error: %s", e)
        return AdminStatus(error=str(e))

    logger.info("Firebase Admin SDK initialized successfully.")
    return AdminStatus(client=AdminClient(app))
