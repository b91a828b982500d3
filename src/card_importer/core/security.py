"""Access token validation.

Tokens are issued by the platform's auth service; this service only
verifies them with PyJWT and reads the subject (the user id).
"""

import uuid

import jwt


def decode_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
    audience: str | None = "authenticated",
) -> dict:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT string to decode.
        secret_key: Secret key used for signing.
        algorithm: JWT signing algorithm.
        audience: Expected ``aud`` claim; None skips the audience check.

    Returns:
        The decoded token payload.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is invalid.
    """
    options = {"require": ["sub", "exp"]}
    if audience is None:
        return jwt.decode(token, secret_key, algorithms=[algorithm], options={**options, "verify_aud": False})
    return jwt.decode(token, secret_key, algorithms=[algorithm], audience=audience, options=options)


def user_id_from_payload(payload: dict) -> uuid.UUID:
    """Return the user id carried in a token's ``sub`` claim.

    Raises:
        jwt.InvalidTokenError: If the subject is missing or not a UUID.
    """
    try:
        return uuid.UUID(str(payload["sub"]))
    except (KeyError, ValueError) as e:
        msg = "Token subject is not a user id"
        raise jwt.InvalidTokenError(msg) from e
