from cirrus.infra.http import Auth, BearerAuth, HttpClient

__all__ = ["Auth", "BearerAuth", "HttpClient"]
