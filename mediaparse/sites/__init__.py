"""
Registry of supported news sites.

Each site module exposes ``CONFIG`` (a ``SiteConfig``) and optionally
``EXTRACTOR``, a ``SelectorExtractor`` subclass for site-specific quirks.

Adding a new site:
  1. Create sites/newsite.py with a ``CONFIG``
  2. Subclass ``SelectorExtractor`` there only if selectors are not enough
  3. Add the module to ``_MODULES`` below
"""
from typing import Dict, List

from mediaparse.extractors.base import Extractor, SelectorExtractor
from mediaparse.siteconfig import SiteConfig

from . import gazeta, interfax, lenta, rbc, ria, tass


_MODULES = [ria, lenta, gazeta, rbc, interfax, tass]

SITES: Dict[str, SiteConfig] = {module.CONFIG.name: module.CONFIG for module in _MODULES}

_EXTRACTORS = {
    module.CONFIG.name: getattr(module, "EXTRACTOR", SelectorExtractor)
    for module in _MODULES
}


def site_names() -> List[str]:
    return list(SITES)


def get_site(name: str) -> SiteConfig:
    try:
        return SITES[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown site '{name}'. Available: {', '.join(SITES)}"
        ) from None


def get_extractor(config: SiteConfig) -> Extractor:
    """Instantiate the extractor registered for ``config`` (generic by default)."""
    extractor_cls = _EXTRACTORS.get(config.name, SelectorExtractor)
    return extractor_cls(config)


__all__ = ["SITES", "get_site", "get_extractor", "site_names"]
