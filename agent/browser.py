from typing import Optional

from playwright.async_api import Browser, Error as PlaywrightError, Locator, Page, async_playwright

from errors import FetchError


class PlaywrightElement:
    """Element wrapper whose reads degrade to empty values instead of raising."""

    def __init__(self, locator: Locator):
        self.locator = locator

    async def click(self) -> None:
        await self.locator.click(timeout=5000)

    async def fill(self, value: str) -> None:
        await self.locator.fill(value, timeout=5000)

    async def text(self) -> str:
        try:
            return await self.locator.inner_text(timeout=2000)
        except PlaywrightError:
            return ""

    async def attribute(self, name: str) -> Optional[str]:
        try:
            return await self.locator.get_attribute(name, timeout=2000)
        except PlaywrightError:
            return None

    async def html(self) -> str:
        try:
            return await self.locator.inner_html(timeout=2000)
        except PlaywrightError:
            return ""


class BrowserController:
    def __init__(self):
        self.browser: Browser | None = None
        self.context = None
        self.page: Page | None = None
        self.playwright = None

    @classmethod
    def from_page(cls, page: Page) -> "BrowserController":
        """Wrap a page owned by the caller. stop() leaves it open."""
        controller = cls()
        controller.page = page
        return controller

    async def start(self, url: str, headless: bool = False) -> None:
        """Launch browser and navigate to URL."""
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=headless)
        self.context = await self.browser.new_context(viewport={"width": 1280, "height": 800})
        self.page = await self.context.new_page()
        await self.page.goto(url)

    async def stop(self) -> None:
        """Close browser if we launched it."""
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()

    async def screenshot(self, path: str | None = None) -> bytes:
        """Take full-page screenshot."""
        return await self.page.screenshot(path=path, type="png", full_page=True)

    async def find(
        self,
        selector: str,
        frame: Optional[str] = None,
        timeout_ms: int = 0,
        visible: bool = True,
    ) -> Optional[PlaywrightElement]:
        """First match for selector, optionally inside the iframe matching frame."""
        scope = self.page.frame_locator(frame) if frame else self.page
        locator = scope.locator(selector).first
        try:
            if timeout_ms > 0:
                await locator.wait_for(state="visible" if visible else "attached", timeout=timeout_ms)
            elif visible and not await locator.is_visible():
                return None
            elif not visible and await locator.count() == 0:
                return None
        except PlaywrightError:
            return None
        return PlaywrightElement(locator)

    async def fetch(self, url: str) -> bytes:
        """GET url through the page's context (shares cookies with the widget)."""
        response = await self.page.request.get(url)
        if not response.ok:
            raise FetchError(f"GET {url} returned HTTP {response.status}")
        return await response.body()

    async def wait(self, ms: int) -> None:
        await self.page.wait_for_timeout(ms)
