"""AuthenticationFlow — exchanges credentials for a token and binds the account.

Login and logout report a RequestStatus instead of raising: failing to
log in is an expected, recoverable outcome. Classified errors raised by
the executor during login are folded into a FAILURE status.
"""

from __future__ import annotations

import structlog

from robinhood_client.auth.state_machine import AuthState, AuthStateMachine
from robinhood_client.endpoints import account, authorize
from robinhood_client.endpoints.types import Account, Token
from robinhood_client.net import status
from robinhood_client.net.errors import RobinhoodError
from robinhood_client.net.executor import RequestExecutor
from robinhood_client.net.pagination import Page
from robinhood_client.net.session import Session
from robinhood_client.net.status import RequestStatus

log = structlog.get_logger()


class AuthenticationFlow:
    """Login/logout protocol over a RequestExecutor and a Session.

    When the token exchange succeeds but the account lookup comes back
    without an account number, the token is left in the Session even
    though FAILURE is reported. The state machine still falls back to
    ANONYMOUS because no account is bound.

    A new token always unbinds the previous account. If the exchange itself
    fails, the Session keeps its earlier token and account, and the state
    returns to AUTHENTICATED when one is still bound.
    """

    def __init__(self, executor: RequestExecutor, session: Session) -> None:
        self._executor = executor
        self._session = session
        self._machine = AuthStateMachine(
            AuthState.AUTHENTICATED if session.account_id else AuthState.ANONYMOUS
        )

    @property
    def state(self) -> AuthState:
        return self._machine.state

    def login(self, username: str, password: str) -> RequestStatus:
        """Exchange credentials for a token, then fetch the account number."""
        self._machine.transition(AuthState.AUTHENTICATING)
        try:
            result = self._login(username, password)
        finally:
            # a failed exchange leaves an earlier binding in place
            self._machine.transition(
                AuthState.AUTHENTICATED
                if self._session.account_id is not None
                else AuthState.ANONYMOUS
            )
        return result

    def use_token(self, token: str) -> None:
        """Adopt a token obtained elsewhere; unbinds the account if it changed."""
        self._session.set_token(token)
        if self._session.account_id is None:
            self._machine.reset()

    def _login(self, username: str, password: str) -> RequestStatus:
        try:
            token: Token = self._executor.execute(
                authorize.authorize(username, password), self._session
            )
            if not token.token:
                log.error("login_failed", reason="no token")
                return status.failure("no token")

            self._session.set_token(token.token)

            accounts: Page[Account] = self._executor.execute(
                account.get_accounts(), self._session
            )
        except RobinhoodError as e:
            log.error("login_failed", reason=str(e), error_type=type(e).__name__)
            return status.failure(str(e))

        if not accounts.results:
            log.error("login_failed", reason="no account")
            return status.failure("no account")

        account_number = accounts.results[0].account_number
        if account_number is None:
            log.warning(
                "login_failed",
                reason="Failed to get account number",
                token_retained=True,
            )
            return status.failure("Failed to get account number")

        self._session.set_account_id(account_number)
        log.info("login_succeeded", account_id=account_number)
        return status.success()

    def logout(self) -> RequestStatus:
        """Revoke the token and clear the Session.

        Reports SUCCESS whenever a token existed, whatever the remote said.
        """
        if not self._session.has_token():
            return status.not_logged_in()

        try:
            self._executor.execute(authorize.logout(), self._session)
        except RobinhoodError as e:
            log.warning("logout_request_failed", error=str(e))
        finally:
            self._session.clear()
            self._machine.reset()

        log.info("logged_out")
        return status.success()
