# =============================================================================
# app/routers/seo.py - Crawler Metadata
# =============================================================================
# /robots.txt and /sitemap.xml for the public site. Both are built from
# PUBLIC_BASE_URL so staging deployments advertise their own host.
# =============================================================================

from datetime import date
from xml.etree import ElementTree

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from app.config import settings

router = APIRouter()

DISALLOWED_PATHS = ["/api/", "/profile/", "/sign-in/", "/sign-up/"]

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

# (path, change frequency, priority)
PUBLIC_PAGES = [
    ("", "daily", "1.0"),
    ("/dolar", "hourly", "0.9"),
    ("/indicadores/ipc", "monthly", "0.8"),
    ("/indicadores/emae", "monthly", "0.8"),
    ("/indicadores/empleo", "monthly", "0.8"),
    ("/indicadores/riesgo-pais", "daily", "0.8"),
    ("/pobreza-argentina", "monthly", "0.8"),
    ("/calendario", "weekly", "0.7"),
    ("/documentacion", "weekly", "0.7"),
    ("/contacto", "monthly", "0.5"),
]


def build_robots_txt(sitemap_url: str) -> str:
    lines = ["User-agent: *", "Allow: /"]
    lines += [f"Disallow: {path}" for path in DISALLOWED_PATHS]
    lines += ["", f"Sitemap: {sitemap_url}", ""]
    return "\n".join(lines)


def build_sitemap_xml(base_url: str, today: date) -> bytes:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for path, frequency, priority in PUBLIC_PAGES:
        url = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(url, "loc").text = f"{base_url.rstrip('/')}{path}"
        ElementTree.SubElement(url, "lastmod").text = today.isoformat()
        ElementTree.SubElement(url, "changefreq").text = frequency
        ElementTree.SubElement(url, "priority").text = priority
    return ElementTree.tostring(urlset, encoding="utf-8", xml_declaration=True)


@router.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots_txt():
    return build_robots_txt(settings.sitemap_url)


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap_xml():
    return Response(
        content=build_sitemap_xml(settings.PUBLIC_BASE_URL, date.today()),
        media_type="application/xml",
    )
