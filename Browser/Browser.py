"""
Browser/Browser.py — Minimal synchronous page fetcher and form submitter.

Owns an :class:`httpx.Client` (cookies and redirects are handled there), the
current page, and a navigation history. :meth:`Browser.submit` is the
submitter every :class:`~Form.Form` obtained from :meth:`Browser.form` calls
when it is clicked.
"""
from __future__ import annotations

import logging
import secrets
from typing import Optional
from urllib.parse import urlparse, urlunparse

import httpx
from bs4 import BeautifulSoup

from Form import Form, encode
from Models import ElementNotFound, Page, ParseError, Submission
from Parser import DEFAULT_ENCTYPE, build_catalog, find_forms

logger = logging.getLogger(__name__)


class Browser:
    """Loads pages and submits forms over a shared :class:`httpx.Client`.

    Usage::

        with Browser() as bow:
            bow.open("https://example.com/signup")
            form = bow.form("[name='default']")
            form.input("age", "55")
            form.click("submit2")
            print(bow.body)
    """

    DEFAULT_USER_AGENT: str = "form-surfer/1.0"

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        proxy: Optional[str] = None,
        verify: bool = True,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        kwargs: dict = {
            "timeout": timeout,
            "verify": verify,
            "follow_redirects": True,
            "headers": {"User-Agent": user_agent or self.DEFAULT_USER_AGENT, **(headers or {})},
        }
        if proxy:
            kwargs["proxy"] = proxy
        if transport is not None:
            kwargs["transport"] = transport
        self._http = httpx.Client(**kwargs)

        self.history: list[Page] = []
        self.submissions: list[Submission] = []

    # ------------------------------------------------------------------
    # Current page
    # ------------------------------------------------------------------

    @property
    def page(self) -> Optional[Page]:
        return self.history[-1] if self.history else None

    @property
    def url(self) -> str:
        return self.page.url if self.page else ""

    @property
    def status(self) -> int:
        return self.page.status if self.page else 0

    @property
    def body(self) -> str:
        return self.page.body if self.page else ""

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def open(self, url: str) -> Page:
        """GET *url* and make the response the current page."""
        logger.debug("GET %s", url)
        return self._load(self._http.get(url))

    def back(self) -> bool:
        """Return to the previous page; *False* if there is none."""
        if len(self.history) < 2:
            return False
        self.history.pop()
        logger.debug("Back to %s", self.url)
        return True

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def forms(self) -> list[Form]:
        """Return every form of the current page in document order."""
        self._require_page()
        return [
            Form(build_catalog(tag, self.url), submitter=self.submit)
            for tag in find_forms(self.body)
        ]

    def form(self, selector: str = "form") -> Form:
        """Return the first form of the current page matching CSS *selector*."""
        self._require_page()
        soup = BeautifulSoup(self.body, "html.parser")
        for tag in soup.select(selector):
            if tag.name == "form":
                return Form(build_catalog(tag, self.url), submitter=self.submit)
        raise ElementNotFound(f"No form found matching selector '{selector}'.")

    def submit(
        self,
        method: str,
        action: str,
        enctype: str,
        pairs: list[tuple[str, str]],
    ) -> Page:
        """Send *pairs* to *action* the way a browser submits a form.

        ``GET`` replaces the query string of the action URL with the encoded
        pairs. ``POST`` sends them as the request body in *enctype*. The
        response becomes the current page. Transport errors propagate as
        :class:`httpx.HTTPError`.
        """
        target = action or self.url
        if method.upper() == "POST":
            response = self._post(target, enctype, pairs)
        else:
            parsed = urlparse(target)
            target = urlunparse(parsed._replace(query=encode(pairs), fragment=""))
            logger.debug("GET %s", target)
            response = self._http.get(target)

        self.submissions.append(
            Submission(
                method=method.upper(),
                url=str(response.request.url),
                enctype=enctype,
                pairs=list(pairs),
                status=response.status_code,
            )
        )
        return self._load(response)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    def __enter__(self) -> "Browser":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _post(
        self, url: str, enctype: str, pairs: list[tuple[str, str]]
    ) -> httpx.Response:
        logger.debug("POST %s (%s, %d pair(s))", url, enctype, len(pairs))
        if enctype == "multipart/form-data":
            if not pairs:
                # httpx omits the body and Content-Type for an empty files list
                boundary = secrets.token_hex(16)
                return self._http.post(
                    url,
                    content=f"--{boundary}--\r\n".encode(),
                    headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
                )
            # (None, value) makes httpx send a plain field rather than a file
            files = [(name, (None, value)) for name, value in pairs]
            return self._http.post(url, files=files)
        if enctype == "text/plain":
            body = "".join(f"{name}={value}\r\n" for name, value in pairs)
            return self._http.post(
                url, content=body.encode(), headers={"Content-Type": "text/plain"}
            )
        return self._http.post(
            url,
            content=encode(pairs).encode("ascii"),
            headers={"Content-Type": DEFAULT_ENCTYPE},
        )

    def _load(self, response: httpx.Response) -> Page:
        page = Page(
            url=str(response.url),
            status=response.status_code,
            body=response.text,
        )
        if response.status_code >= 400:
            logger.debug("HTTP %d for %s", response.status_code, page.url)
        self.history.append(page)
        return page

    def _require_page(self) -> None:
        if self.page is None:
            raise ParseError("No page has been opened.")
