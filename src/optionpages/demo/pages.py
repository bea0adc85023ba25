"""Settings screen of the demo transliteration plugin.

``Settings`` is the root page holding general options; ``Converter`` and
``Tables`` are tabs stored in the same option.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..fields import FieldType
from ..page import SettingsPage
from ..sanitize import esc_attr, esc_html
from .tables import LOCALE_TABLES

if TYPE_CHECKING:
    from ..host import SettingsSection

OPTION_PAGE = "translit"
OPTION_NAME = "translit_settings"


class TranslitSettingsBase(SettingsPage):
    """Identity shared by every tab of the transliteration screen."""

    def screen_id(self) -> str:
        return f"settings_page_{OPTION_PAGE}"

    def option_group(self) -> str:
        return "translit_group"

    def option_page(self) -> str:
        return OPTION_PAGE

    def option_name(self) -> str:
        return OPTION_NAME

    def text_domain(self) -> str:
        return "translit"

    def settings_link_label(self) -> str:
        return self.translate("View Transliteration settings")

    def settings_link_text(self) -> str:
        return self.translate("Settings")

    def menu_title(self) -> str:
        return self.translate("Transliteration")

    def section_title(self) -> str:
        return ""

    def section_callback(self, section: SettingsSection) -> str:
        return ""

    def settings_page(self) -> str:
        return self.render_form()

    def admin_enqueue_scripts(self) -> None:
        return None


class Settings(TranslitSettingsBase):
    """General options; root of the tab group."""

    def page_title(self) -> str:
        return self.translate("General")

    def section_title(self) -> str:
        return "general_section"

    def init_form_fields(self) -> dict[str, dict[str, Any]]:
        # Sections take the title of their last registered field.
        title = self.translate("General Options")
        return {
            "transliterate": {
                "label": self.translate("Transliterate"),
                "section": "general_section",
                "title": title,
                "type": FieldType.CHECKBOX,
                "options": {"modern": self.translate("Modern")},
                "default": [],
                "helper": self.translate("Convert <em>post slugs</em> on save."),
            },
            "mode": {
                "label": self.translate("Mode"),
                "section": "general_section",
                "title": title,
                "type": FieldType.RADIO,
                "options": {
                    "slugs": self.translate("Slugs only"),
                    "slugs_files": self.translate("Slugs and file names"),
                },
                "default": "slugs",
            },
            "max_length": {
                "label": self.translate("Maximum slug length"),
                "section": "general_section",
                "title": title,
                "type": FieldType.NUMBER,
                "min": 10,
                "max": 200,
                "default": "100",
            },
            "fix_mac_filenames": {
                "label": self.translate("Fix macOS file names"),
                "section": "general_section",
                "title": title,
                "type": FieldType.CHECKBOX,
                "default": "no",
                "supplemental": self.translate("Normalize decomposed characters in uploaded file names."),
            },
        }


class Converter(TranslitSettingsBase):
    """Options of the background converter of existing content."""

    def page_title(self) -> str:
        return self.translate("Converter")

    def section_title(self) -> str:
        return "converter_section"

    def section_callback(self, section: SettingsSection) -> str:
        return (
            '<p class="description">'
            f'{esc_html(self.translate("Existing slugs are converted in the background."))}'
            "</p>"
        )

    def init_form_fields(self) -> dict[str, dict[str, Any]]:
        title = self.translate("Content Conversion Options")
        return {
            "background_post_types": {
                "label": self.translate("Post Types"),
                "section": "converter_section",
                "title": title,
                "type": FieldType.MULTIPLE,
                "options": {
                    "post": self.translate("Posts"),
                    "page": self.translate("Pages"),
                    "attachment": self.translate("Media"),
                },
                "default": ["post", "page"],
            },
            "background_post_statuses": {
                "label": self.translate("Post Statuses"),
                "section": "converter_section",
                "title": title,
                "type": FieldType.SELECT,
                "options": {
                    "publish": self.translate("Published"),
                    "any": self.translate("Any"),
                },
                "default": "publish",
            },
            "batch_label": {
                "label": self.translate("Batch label"),
                "section": "converter_section",
                "title": title,
                "type": FieldType.TEXT,
                "placeholder": self.translate("e.g. nightly"),
            },
            "converter_token": {
                "label": self.translate("Converter token"),
                "section": "converter_section",
                "title": title,
                "type": FieldType.PASSWORD,
            },
            "exclude_slugs": {
                "label": self.translate("Excluded slugs"),
                "section": "converter_section",
                "title": title,
                "type": FieldType.TEXTAREA,
                "supplemental": self.translate("One slug per line; matching slugs are never converted."),
            },
        }


class Tables(TranslitSettingsBase):
    """One editable table per supported locale."""

    def page_title(self) -> str:
        return self.translate("Tables")

    def section_title(self) -> str:
        return "tables_section"

    def section_callback(self, section: SettingsSection) -> str:
        return f'<div id="ctl-{esc_attr(section.id)}" class="ctl-table-section"></div>'

    def init_form_fields(self) -> dict[str, dict[str, Any]]:
        return {
            locale: {
                "label": title,
                "section": f"{locale}_section",
                "title": title,
                "type": FieldType.TABLE,
                "placeholder": "",
                "default": dict(table),
            }
            for locale, (title, table) in LOCALE_TABLES.items()
        }

    def admin_enqueue_scripts(self) -> None:
        self.host.enqueue_style(
            "translit-tables",
            f"{self.plugin_url()}/assets/css/tables{self.plugin.asset_suffix}.css",
            [],
            self.plugin_version(),
        )
