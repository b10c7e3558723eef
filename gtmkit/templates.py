"""Example tag and trigger structures for common Tag Manager setups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TagTemplate:
    """An example parameter structure for creating a tag."""

    name: str
    description: str
    type: str
    parameters: str
    notes: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "parameters": self.parameters,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class TriggerTemplate:
    """An example structure for creating a trigger."""

    name: str
    description: str
    type: str
    notes: str
    filter_json: str = ""
    auto_event_filter_json: str = ""
    custom_event_filter_json: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.type,
        }
        if self.filter_json:
            result["filterJson"] = self.filter_json
        if self.auto_event_filter_json:
            result["autoEventFilterJson"] = self.auto_event_filter_json
        if self.custom_event_filter_json:
            result["customEventFilterJson"] = self.custom_event_filter_json
        result["notes"] = self.notes
        return result


_GA4_EVENT_HEAD = """  {"type": "tagReference", "key": "measurementId", "value": ""},
  {"type": "template", "key": "measurementIdOverride", "value": "{{GA4 Measurement ID}}"},"""

_TAG_TEMPLATES = (
    TagTemplate(
        name="GA4 Configuration",
        description="Google Analytics 4 configuration tag (fires on all pages)",
        type="gaawc",
        parameters="""[
  {"type": "template", "key": "measurementId", "value": "G-XXXXXXXXXX"}
]""",
        notes="Use gaawc type for GA4 Config tags. The measurementId should be your GA4 Measurement ID.",
    ),
    TagTemplate(
        name="GA4 Event (Simple)",
        description="Google Analytics 4 event tag with custom event name",
        type="gaawe",
        parameters="[\n" + _GA4_EVENT_HEAD + """
  {"type": "template", "key": "eventName", "value": "custom_event_name"}
]""",
        notes=(
            "Use gaawe type for GA4 Event tags. measurementId must be empty tagReference, "
            "use measurementIdOverride for the actual value (variable reference or literal)."
        ),
    ),
    TagTemplate(
        name="GA4 Event with Parameters",
        description="Google Analytics 4 event tag with custom parameters",
        type="gaawe",
        parameters="[\n" + _GA4_EVENT_HEAD + """
  {"type": "template", "key": "eventName", "value": "button_click"},
  {"type": "list", "key": "eventParameters", "list": [
    {"type": "map", "map": [
      {"type": "template", "key": "name", "value": "button_id"},
      {"type": "template", "key": "value", "value": "{{Click ID}}"}
    ]},
    {"type": "map", "map": [
      {"type": "template", "key": "name", "value": "button_text"},
      {"type": "template", "key": "value", "value": "{{Click Text}}"}
    ]}
  ]}
]""",
        notes=(
            "Event parameters use name/value pairs inside map structures. "
            "Do NOT use the parameter name as the key directly."
        ),
    ),
    TagTemplate(
        name="GA4 Ecommerce Purchase",
        description="Google Analytics 4 ecommerce purchase event (reads items from dataLayer)",
        type="gaawe",
        parameters="[\n" + _GA4_EVENT_HEAD + """
  {"type": "template", "key": "eventName", "value": "purchase"},
  {"type": "boolean", "key": "sendEcommerceData", "value": "true"},
  {"type": "template", "key": "getEcommerceDataFrom", "value": "dataLayer"},
  {"type": "list", "key": "eventParameters", "list": [
    {"type": "map", "map": [
      {"type": "template", "key": "name", "value": "transaction_id"},
      {"type": "template", "key": "value", "value": "{{DL - Transaction ID}}"}
    ]}
  ]}
]""",
        notes=(
            "For ecommerce events, set sendEcommerceData=true and getEcommerceDataFrom=dataLayer. "
            "The items array will be read automatically from the dataLayer ecommerce object."
        ),
    ),
    TagTemplate(
        name="GA4 Ecommerce Add to Cart",
        description="Google Analytics 4 ecommerce add_to_cart event",
        type="gaawe",
        parameters="[\n" + _GA4_EVENT_HEAD + """
  {"type": "template", "key": "eventName", "value": "add_to_cart"},
  {"type": "boolean", "key": "sendEcommerceData", "value": "true"},
  {"type": "template", "key": "getEcommerceDataFrom", "value": "dataLayer"}
]""",
        notes="Similar to purchase, but for add_to_cart event. Items are read from dataLayer.",
    ),
    TagTemplate(
        name="GA4 Ecommerce View Item",
        description="Google Analytics 4 ecommerce view_item event",
        type="gaawe",
        parameters="[\n" + _GA4_EVENT_HEAD + """
  {"type": "template", "key": "eventName", "value": "view_item"},
  {"type": "boolean", "key": "sendEcommerceData", "value": "true"},
  {"type": "template", "key": "getEcommerceDataFrom", "value": "dataLayer"}
]""",
        notes="For product detail page views. Items are read from dataLayer.",
    ),
    TagTemplate(
        name="Custom HTML",
        description="Custom HTML tag for arbitrary JavaScript",
        type="html",
        parameters=(
            "[\n"
            '  {"type": "template", "key": "html", "value": '
            '"<script>\\n  console.log(\'Hello from GTM!\');\\n</script>"}\n'
            "]"
        ),
        notes="Use html type for custom JavaScript. The html parameter contains the script.",
    ),
    TagTemplate(
        name="Custom Image (Pixel)",
        description="Custom image tag for tracking pixels",
        type="img",
        parameters="""[
  {"type": "template", "key": "url", "value": "https://example.com/pixel.gif?event=pageview"},
  {"type": "boolean", "key": "useCacheBuster", "value": "true"},
  {"type": "template", "key": "cacheBusterQueryParam", "value": "gtmcb"}
]""",
        notes="Use img type for tracking pixels. Enable cacheBuster to prevent caching.",
    ),
)

_TRIGGER_TEMPLATES = (
    TriggerTemplate(
        name="All Pages",
        description="Fires on every page view",
        type="pageview",
        notes="Simple pageview trigger with no filters.",
    ),
    TriggerTemplate(
        name="Specific Page",
        description="Fires on a specific page URL",
        type="pageview",
        filter_json="""[
  {"type": "contains", "parameter": [
    {"type": "template", "key": "arg0", "value": "{{Page URL}}"},
    {"type": "template", "key": "arg1", "value": "/checkout"}
  ]}
]""",
        notes="Use filterJson to match specific pages. arg0 is the variable, arg1 is the value to match.",
    ),
    TriggerTemplate(
        name="Custom Event",
        description="Fires on a dataLayer custom event",
        type="customEvent",
        custom_event_filter_json="""[
  {"type": "equals", "parameter": [
    {"type": "template", "key": "arg0", "value": "{{_event}}"},
    {"type": "template", "key": "arg1", "value": "purchase"}
  ]}
]""",
        notes=(
            "For customEvent triggers, use customEventFilterJson (not filterJson). "
            "The {{_event}} variable matches the dataLayer event name."
        ),
    ),
    TriggerTemplate(
        name="Click - All Elements",
        description="Fires on all element clicks",
        type="linkClick",
        auto_event_filter_json="""[
  {"type": "contains", "parameter": [
    {"type": "template", "key": "arg0", "value": "{{Click Classes}}"},
    {"type": "template", "key": "arg1", "value": "cta-button"}
  ]}
]""",
        notes=(
            "Use linkClick for click triggers. Use autoEventFilterJson to filter by click "
            "element properties (Click Classes, Click ID, Click URL, etc.)."
        ),
    ),
    TriggerTemplate(
        name="Form Submission",
        description="Fires on form submissions",
        type="formSubmission",
        auto_event_filter_json="""[
  {"type": "equals", "parameter": [
    {"type": "template", "key": "arg0", "value": "{{Form ID}}"},
    {"type": "template", "key": "arg1", "value": "contact-form"}
  ]}
]""",
        notes=(
            "Use formSubmission type. Use autoEventFilterJson to filter by form properties "
            "(Form ID, Form Classes, Form URL, etc.)."
        ),
    ),
)


def get_tag_templates() -> list[TagTemplate]:
    """Example parameter structures for common tag types."""
    return list(_TAG_TEMPLATES)


def get_trigger_templates() -> list[TriggerTemplate]:
    """Example structures for common trigger types."""
    return list(_TRIGGER_TEMPLATES)