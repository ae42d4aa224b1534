import logging

from portfolio.client.remote import RemoteDataClient

logger = logging.getLogger(__name__)


class SessionState:
    """Indique si la session courante est authentifiée côté admin."""

    def __init__(self, is_authenticated: bool = False):
        self.is_authenticated = is_authenticated

    async def refresh(self, client: RemoteDataClient) -> bool:
        self.is_authenticated = await client.check_session()
        return self.is_authenticated

    async def login(self, client: RemoteDataClient, username: str, password: str) -> bool:
        self.is_authenticated = await client.login(username, password)
        if not self.is_authenticated:
            logger.warning(f"Admin login refused for '{username}'")
        return self.is_authenticated

    async def logout(self, client: RemoteDataClient) -> None:
        try:
            await client.logout()
        finally:
            self.is_authenticated = False
            # les données admin en cache ne doivent pas survivre à la session
            client.clear()
