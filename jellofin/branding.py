"""Branding endpoints: login page options and custom CSS."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class BrandingOptions:
    login_disclaimer: str | None = None
    custom_css: str | None = None
    splashscreen_enabled: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """The JSON body, with unset options left out."""
        fields = {
            "LoginDisclaimer": self.login_disclaimer,
            "CustomCss": self.custom_css,
            "SplashscreenEnabled": self.splashscreen_enabled,
        }
        return {key: value for key, value in fields.items() if value is not None}


def get_branding_configuration() -> BrandingOptions:
    return BrandingOptions(splashscreen_enabled=False)


def get_branding_css() -> tuple[dict[str, str], str]:
    """Response headers and body for the (empty) custom stylesheet."""
    return {"Content-Type": "text/css"}, ""