"""
MockAPI Array/Delay Modulator

Optional post-processing of the success response: array repetition and
artificial latency.
"""

import random
import logging
from typing import List, Optional

from .models import ArrayConfig, DelayConfig
from .generator import TagExpander, has_tags


logger = logging.getLogger("mockapi.engine")


def split_array_elements(template: str) -> Optional[List[str]]:
    """
    Split an array template into its top-level element templates.

    Works on the raw text, before tag expansion, so bare tags such as
    ``{"age": <<age>>}`` need not be valid JSON. Commas and brackets inside
    string literals are ignored.

    Returns:
        Element template texts, or None if the template is not a single
        non-empty array
    """
    text = template.strip()
    if not (text.startswith('[') and text.endswith(']')):
        return None

    elements: List[str] = []
    depth = 0
    in_string = False
    escaped = False
    start = 1
    last = len(text) - 1

    for i, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in '[{':
            depth += 1
        elif char in ']}':
            depth -= 1
            # the outer array must close on the last character
            if depth < 0 or (depth == 0 and i != last):
                return None
        elif char == ',' and depth == 1:
            elements.append(text[start:i].strip())
            start = i + 1

    if depth != 0 or in_string:
        return None

    elements.append(text[start:last].strip())
    if not all(elements):
        return None
    return elements


def repeat_array(
    template: str,
    array_config: Optional[ArrayConfig],
    expander: TagExpander,
    rng: random.Random
) -> Optional[str]:
    """
    Repeat the element template of an array-shaped template.

    The template must be a non-empty array; its elements are found on the
    raw text, so bare tags are allowed. A count is drawn uniformly from
    [min, max] and each emitted element is expanded on its own, so every
    element gets fresh values. Multi-element templates are cycled through.

    Args:
        template: Raw response template
        array_config: Repetition range, or None when repetition is off
        expander: Tag expander used per element
        rng: Random source for the count draw

    Returns:
        The expanded array text, or None when the template is not
        array-shaped or repetition is off
    """
    if array_config is None:
        return None

    element_templates = split_array_elements(template)
    if element_templates is None:
        logger.debug("Template is not a non-empty array, skipping repetition")
        return None

    array_config.validate()
    count = rng.randint(int(array_config.min), int(array_config.max))

    rendered: List[str] = []
    for i in range(count):
        element_template = element_templates[i % len(element_templates)]
        rendered.append(expander.expand(element_template))

    logger.debug(f"Repeated array element template {count} times")
    return '[' + ', '.join(rendered) + ']'


def compute_delay(delay_config: Optional[DelayConfig], rng: random.Random) -> int:
    """
    Draw the advisory response delay in milliseconds.

    The engine only reports the delay; holding the response is the HTTP
    layer's job.

    Raises:
        ConfigurationError: If the range is invalid
    """
    if delay_config is None or not delay_config.enabled:
        return 0
    delay_config.validate()
    return rng.randint(int(delay_config.min), int(delay_config.max))


def describe_dynamic_features(template: str, delay_config: Optional[DelayConfig] = None) -> List[str]:
    """List the dynamic features a response configuration uses."""
    features = []
    if has_tags(template):
        features.append('Dynamic Data')
    if '[' in template and ']' in template:
        features.append('Arrays')
    if delay_config is not None and delay_config.enabled:
        features.append('Response Delay')
    return features
