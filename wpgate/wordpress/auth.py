"""HTTP Basic credentials for the WordPress REST API (application passwords)."""

import base64
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credential:
    """Identity + secret pair, built once at startup and never logged."""

    identity: str
    secret: str = field(repr=False)

    def authorization_header(self) -> str:
        return basic_auth_header(self)


def basic_auth_header(credential: Credential) -> str:
    """Return the ``Authorization`` value for HTTP Basic auth.

    >>> basic_auth_header(Credential("admin", "pw"))
    'Basic YWRtaW46cHc='
    """
    token = f"{credential.identity}:{credential.secret}".encode()
    return f"Basic {base64.b64encode(token).decode('ascii')}"
