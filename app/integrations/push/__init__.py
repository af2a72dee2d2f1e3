"""Push notification integration.

Firebase Cloud Messaging, OneSignal and Expo behind one PushProvider contract.
"""

from infrastructure.configuration import PushSettings
from integrations.push.base import PushNotification, PushProvider
from integrations.push.expo import ExpoProvider
from integrations.push.firebase import FirebaseProvider
from integrations.push.onesignal import OneSignalProvider


def build_push_provider(settings: PushSettings) -> PushProvider:
    """Create the configured push provider.

    Raises:
        ValueError: If PUSH_PROVIDER is not firebase, onesignal or expo.
    """
    provider = settings.PUSH_PROVIDER.lower()
    if provider == "firebase":
        return FirebaseProvider(
            server_key=settings.PUSH_API_KEY, timeout=settings.PUSH_TIMEOUT_SECONDS
        )
    if provider == "onesignal":
        return OneSignalProvider(
            api_key=settings.PUSH_API_KEY,
            app_id=settings.ONESIGNAL_APP_ID,
            timeout=settings.PUSH_TIMEOUT_SECONDS,
        )
    if provider == "expo":
        return ExpoProvider(
            access_token=settings.PUSH_API_KEY, timeout=settings.PUSH_TIMEOUT_SECONDS
        )
    raise ValueError(f"Unsupported push provider: {settings.PUSH_PROVIDER}")


__all__ = [
    "PushNotification",
    "PushProvider",
    "FirebaseProvider",
    "OneSignalProvider",
    "ExpoProvider",
    "build_push_provider",
]
