import os

from .errors import SigningIdentityNotFound
from .models import SigningIdentity

DEBUG_IDENTITY = SigningIdentity(
    name="debug",
    store_file=os.path.join(os.path.expanduser("~"), ".android", "debug.keystore"),
    key_alias="androiddebugkey",
    debuggable=True,
)


class SigningTable:
    """
    Signing identities known to the host environment, keyed by name.

    Instances are callable so they can be injected wherever a
    ``lookup_signing_identity(name)`` function is expected. The Android debug
    identity is available unless ``include_debug`` is False or the table
    redefines it.
    """

    def __init__(self, identities=(), include_debug=True):
        self._identities = {}
        if include_debug:
            self._identities[DEBUG_IDENTITY.name] = DEBUG_IDENTITY
        for identity in identities:
            self._identities[identity.name] = identity

    @classmethod
    def from_config(cls, signing_conf, include_debug=True):
        identities = []
        for name, entry in (signing_conf or {}).items():
            identities.append(SigningIdentity(
                name=name,
                store_file=os.path.expanduser(str(entry.get("store_file", ""))),
                key_alias=str(entry.get("key_alias", "")),
                debuggable=bool(entry.get("debuggable", False)),
            ))
        return cls(identities, include_debug=include_debug)

    def names(self):
        return sorted(self._identities)

    def lookup(self, name):
        try:
            return self._identities[name]
        except KeyError:
            raise SigningIdentityNotFound(name) from None

    __call__ = lookup
