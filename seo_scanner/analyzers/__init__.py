from .network import check_ssl, check_http_redirect, check_response_time, check_http_status
from .discovery import check_robots_txt, check_sitemap, check_favicon, check_llms_txt
from .meta_tags import check_title, check_meta_description, check_open_graph, check_canonical
from .mobile import check_viewport
from .headings import check_h1
from .structured_data import check_structured_data
from .content import check_content_length
from .images import check_image_alts
from .links import check_links

# On-page checks, run in this order over the fetched homepage
HTML_CHECKS = (
    check_title,
    check_meta_description,
    check_viewport,
    check_open_graph,
    check_canonical,
    check_h1,
    check_structured_data,
    check_content_length,
    check_image_alts,
    check_links,
)

__all__ = [
    "check_ssl",
    "check_http_redirect",
    "check_response_time",
    "check_http_status",
    "check_robots_txt",
    "check_sitemap",
    "check_favicon",
    "check_llms_txt",
    "check_title",
    "check_meta_description",
    "check_open_graph",
    "check_canonical",
    "check_viewport",
    "check_h1",
    "check_structured_data",
    "check_content_length",
    "check_image_alts",
    "check_links",
    "HTML_CHECKS",
]
