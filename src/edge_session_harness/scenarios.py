"""Built-in Edge scenarios."""

from __future__ import annotations

from .errors import RemoteConnectionError
from .harness.runner import ScenarioRegistry
from .harness.scenario import ScenarioContext

USER_AGENT_SCRIPT = "return window.navigator.userAgent"
LANGUAGE_SCRIPT = "return window.navigator.userlanguage || window.navigator.language"

REGISTRY = ScenarioRegistry()


@REGISTRY.register("launch", tags={"local"})
def can_launch_edge(ctx: ScenarioContext) -> None:
    """Start Edge and load the example page."""

    driver = ctx.start_session()
    ctx.navigate(driver, ctx.pages.example_url)
    ctx.assert_title_equals(driver, ctx.pages.example_title)


@REGISTRY.register("multiple-sessions", tags={"local", "headless"})
def can_launch_multiple_edge_sessions(ctx: ScenarioContext) -> None:
    """Two headless sessions stay independent of each other."""

    config = ctx.configure()
    config.headless = True

    first = ctx.start_session(config)
    ctx.navigate(first, ctx.pages.example_url)

    second = ctx.start_session(config)
    ctx.navigate(second, ctx.pages.example_url)

    with ctx.assertion_scope():
        ctx.assert_title_equals(first, ctx.pages.example_title)
        ctx.assert_title_equals(second, ctx.pages.example_title)


@REGISTRY.register("headless-user-agent", tags={"local", "headless"})
def can_launch_edge_headless(ctx: ScenarioContext) -> None:
    """Headless Edge reports itself as headless in the user agent."""

    config = ctx.configure()
    config.headless = True
    driver = ctx.start_session(config)
    ctx.navigate(driver, ctx.pages.example_url)

    user_agent = ctx.evaluate_script(driver, USER_AGENT_SCRIPT).as_text()

    with ctx.assertion_scope():
        ctx.assert_title_equals(driver, ctx.pages.example_title)
        ctx.assert_contains("user agent", user_agent, "headless", case_insensitive=True)


@REGISTRY.register("preferred-language", tags={"local", "language"})
def can_launch_edge_with_preferred_language(ctx: ScenarioContext) -> None:
    """The accept-language profile preference reaches ``navigator.language``."""

    config = ctx.configure()
    config.accept_languages = "de"
    driver = ctx.start_session(config)
    ctx.navigate(driver, ctx.pages.language_url)

    language = ctx.evaluate_script(driver, LANGUAGE_SCRIPT).as_text()

    with ctx.assertion_scope():
        ctx.assert_title_equals(driver, ctx.pages.language_title)
        ctx.assert_equal("navigator language", language, "de", case_insensitive=True)


@REGISTRY.register("headless-preferred-language", tags={"local", "language", "legacy"})
def headless_edge_ignores_preferred_language(ctx: ScenarioContext) -> None:
    """Legacy headless Edge drops the accept-language profile preference.

    Passes only on browsers with the old headless mode, and never on a
    machine whose system language is already ``nl``.
    """

    config = ctx.configure()
    config.accept_languages = "nl"
    config.headless = True
    driver = ctx.start_session(config)
    ctx.navigate(driver, ctx.pages.language_url)

    language = ctx.evaluate_script(driver, LANGUAGE_SCRIPT).as_text()

    with ctx.assertion_scope():
        ctx.assert_title_equals(driver, ctx.pages.language_title)
        ctx.assert_not_equal("navigator language", language, "nl", case_insensitive=True)


@REGISTRY.register("remote-grid", tags={"remote"})
def remote_edge_request_fails(ctx: ScenarioContext) -> None:
    """Requesting Chromium Edge from the configured grid fails to connect."""

    config = ctx.configure()
    config.platform_name = "windows"
    ctx.assert_raises(RemoteConnectionError, ctx.start_remote_session, config)
