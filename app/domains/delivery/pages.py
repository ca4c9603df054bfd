"""공개 페이지 라우트용 고정 HTML 페이지

사용자 입력(호스트, 제목, 슬러그)은 모두 html.escape를 거쳐 삽입합니다.
"""

import html
from typing import Iterable, Optional

from app.domains.access.evaluator import Verdict
from app.domains.store.entities import DocumentSummary

BASE_STYLE = (
    "* { margin: 0; padding: 0; box-sizing: border-box; } "
    "body { font-family: system-ui, sans-serif; background: #0a0a0a; color: #fff; "
    "min-height: 100vh; display: flex; align-items: center; justify-content: center; } "
    ".container { text-align: center; padding: 2rem; max-width: 500px; } "
    "h1 { font-size: 2rem; margin-bottom: 1rem; } "
    "p { color: #888; margin-bottom: 1rem; line-height: 1.6; } "
    ".title { color: #fff; font-weight: 500; margin-bottom: 0.5rem; } "
    ".domain { background: #1a1a1a; padding: 0.5rem 1rem; border-radius: 8px; "
    "font-family: monospace; color: #888; margin: 1rem 0; } "
    "a { color: #60a5fa; text-decoration: none; }"
)

BADGE_HTML = """
<style>
  .pagelink-badge { position: fixed; bottom: 20px; right: 20px; background: rgba(15, 15, 15, 0.9); color: white; padding: 10px 16px; border-radius: 100px; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; font-size: 13px; font-weight: 500; text-decoration: none; display: flex; align-items: center; gap: 8px; border: 1px solid rgba(255,255,255,0.1); z-index: 10000; }
  .pagelink-badge:hover { background: rgba(59, 130, 246, 0.9); }
  @media print { .pagelink-badge { display: none; } }
</style>
<a href="https://pagelink.com" class="pagelink-badge" target="_blank" rel="noopener noreferrer">Made with Pagelink</a>"""

DENIAL_COPY = {
    Verdict.NOT_FOUND: ("404", "The page you're looking for doesn't exist."),
    Verdict.PRIVATE: ("Private Document", "This document is not publicly available."),
    Verdict.EXPIRED: ("Document Expired", "This document is no longer available."),
    Verdict.PASSWORD_REQUIRED: (
        "Password Required",
        "This document is password protected. "
        "Send the password in the X-Access-Password header.",
    ),
    Verdict.VIEW_LIMIT_EXCEEDED: (
        "Link Unavailable",
        "This link has reached its maximum views.",
    ),
}

EMAIL_DENIED_COPY = (
    "Access Restricted",
    "This document is only available to invited viewers. "
    "Send your email in the X-Viewer-Email header.",
)


def _page(title: str, body: str, style: str = BASE_STYLE) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n'
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{html.escape(title)}</title>\n"
        f"  <style>{style}</style>\n"
        "</head>\n<body>\n"
        f'  <div class="container">\n{body}\n  </div>\n'
        "</body>\n</html>"
    )


def inject_badge(document_html: str) -> str:
    """첫 번째 </body> 앞에 배지 삽입 (없으면 끝에 추가)"""
    if "</body>" in document_html:
        return document_html.replace("</body>", f"{BADGE_HTML}</body>", 1)
    return document_html + BADGE_HTML


def denied_page(
    verdict: Verdict,
    title: Optional[str] = None,
    email_denied: bool = False,
) -> str:
    """판정별 거부 페이지"""
    heading, message = EMAIL_DENIED_COPY if email_denied else DENIAL_COPY[verdict]
    body = f"    <h1>{html.escape(heading)}</h1>\n"
    if title and verdict != Verdict.NOT_FOUND:
        body += f'    <p class="title">{html.escape(title)}</p>\n'
    body += f"    <p>{html.escape(message)}</p>"
    return _page(heading, body)


def domain_not_configured_page(host: str) -> str:
    body = (
        "    <h1>Domain Not Configured</h1>\n"
        f'    <div class="domain">{html.escape(host)}</div>\n'
        "    <p>This domain is not configured with Pagelink "
        "or verification is pending.</p>"
    )
    return _page("Domain Not Configured", body)


def landing_page(host: str, documents: Iterable[DocumentSummary]) -> str:
    """워크스페이스 랜딩 페이지 (문서 목록)"""
    links = "\n".join(
        f'    <a href="/{html.escape(doc.slug, quote=True)}" class="doc-link">'
        f"{html.escape(doc.title)}</a>"
        for doc in documents
    )
    style = BASE_STYLE + (
        " body { display: block; padding: 4rem 2rem; }"
        " .container { max-width: 600px; margin: 0 auto; text-align: left; }"
        " .doc-link { display: block; padding: 1rem; background: #1a1a1a;"
        " border-radius: 8px; color: #fff; margin-bottom: 0.5rem; }"
    )
    return _page(host, f"    <h1>Documents</h1>\n{links}", style)
