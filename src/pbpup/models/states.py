"""Authentication state machine definitions."""

from enum import Enum


class AuthState(str, Enum):
    """States of the credential exchange with the forum login page."""

    AWAIT_USERNAME = "AWAIT_USERNAME"
    AWAIT_PASSWORD = "AWAIT_PASSWORD"
    SUBMIT = "SUBMIT"
    CHECK_CAPTCHA = "CHECK_CAPTCHA"
    CHECK_RESULT = "CHECK_RESULT"
    SUCCESS = "SUCCESS"


TERMINAL_STATES = {AuthState.SUCCESS}

STATE_TRANSITIONS: dict[AuthState, list[AuthState]] = {
    AuthState.AWAIT_USERNAME: [AuthState.AWAIT_PASSWORD],
    AuthState.AWAIT_PASSWORD: [AuthState.SUBMIT],
    AuthState.SUBMIT: [AuthState.CHECK_CAPTCHA],
    AuthState.CHECK_CAPTCHA: [AuthState.CHECK_RESULT],
    AuthState.CHECK_RESULT: [AuthState.SUCCESS, AuthState.AWAIT_USERNAME],
}
