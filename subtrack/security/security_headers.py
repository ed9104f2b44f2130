"""
Security headers module.

This module builds the security headers the web layer attaches to every
response. Nothing here touches a request or response object.
"""


class SecurityHeaders:
    """
    Security header policy.

    Produces the Content-Security-Policy and companion headers that protect
    against common web vulnerabilities.
    """

    CSP_DIRECTIVES = (
        "default-src 'self'",
        "script-src 'self' 'unsafe-eval' 'unsafe-inline'",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "font-src 'self' https://fonts.gstatic.com",
        "img-src 'self' data: https:",
        "connect-src 'self' https:",
        "frame-ancestors 'none'",
        "base-uri 'self'",
        "form-action 'self'",
    )

    @classmethod
    def content_security_policy(cls) -> str:
        """Return the Content-Security-Policy header value."""
        return '; '.join(cls.CSP_DIRECTIVES)

    @classmethod
    def default_headers(cls, hsts: bool = False) -> dict[str, str]:
        """
        Return the security headers for a response.

        Args:
            hsts: Include Strict-Transport-Security (only behind HTTPS)

        Returns:
            Mapping of header name to value
        """
        headers = {
            'Content-Security-Policy': cls.content_security_policy(),
            # Prevent MIME type sniffing
            'X-Content-Type-Options': 'nosniff',
            # Prevent clickjacking
            'X-Frame-Options': 'DENY',
            'Referrer-Policy': 'strict-origin-when-cross-origin',
            'Permissions-Policy': (
                "geolocation=(), "
                "microphone=(), "
                "camera=(), "
                "payment=(), "
                "usb=()"
            ),
        }
        if hsts:
            headers['Strict-Transport-Security'] = (
                'max-age=31536000; includeSubDomains; preload'
            )
        return headers
