"""
MockAPI Tag Expander

Dynamic data generation for mock response templates.

Features:
- ``<<tag>>`` placeholder expansion inside response templates
- Faker-backed generator table (names, contact data, locations, commerce ...)
- JSON-aware substitution: quoted numeric tags become JSON numbers
- Injectable generator tables for deterministic tests
"""

import base64
import json
import random
import re
from types import MappingProxyType
from typing import Dict, Any, Callable, Mapping, Optional

from faker import Faker


# A generator table maps tag names to zero-argument value factories
GeneratorTable = Mapping[str, Callable[[], Any]]

# Matches a tag filling a whole JSON string literal, or a bare tag.
# An escaped quote (\") never opens a literal.
TAG_PATTERN = re.compile(r'(?<!\\)"<<([A-Za-z_][A-Za-z0-9_]*)>>"|<<([A-Za-z_][A-Za-z0-9_]*)>>')

HTTP_STATUS_CODES = (200, 201, 202, 204, 301, 302, 304, 400, 401, 403, 404, 409, 422, 429, 500, 502, 503)

PRODUCT_NOUNS = (
    'Laptop', 'Keyboard', 'Monitor', 'Headphones', 'Chair', 'Desk', 'Backpack',
    'Camera', 'Watch', 'Speaker', 'Jacket', 'Sneakers', 'Lamp', 'Bottle',
)

PRODUCT_ADJECTIVES = (
    'Ergonomic', 'Wireless', 'Portable', 'Compact', 'Premium', 'Rustic',
    'Sleek', 'Durable', 'Handcrafted', 'Smart',
)

TAG_CATEGORIES = {
    'Person': ['firstname', 'lastname', 'fullname', 'gender', 'age', 'username', 'jobTitle'],
    'Contact': ['email', 'phone'],
    'Location': ['country', 'city', 'street', 'address', 'zipcode'],
    'Date & Time': ['date', 'datetime'],
    'Content': ['sentence', 'paragraph', 'word', 'string'],
    'Internet': ['url', 'email', 'username', 'password', 'jwt'],
    'Numbers': ['number', 'float', 'age', 'price', 'httpStatusCode'],
    'Commerce': ['company', 'product', 'price', 'color'],
    'Media': ['image', 'avatar'],
    'Data': ['uuid', 'boolean', 'string'],
}

SAMPLE_TEMPLATES = {
    'user': {
        'id': '<<uuid>>',
        'name': '<<fullname>>',
        'email': '<<email>>',
        'age': '<<age>>',
        'address': {
            'street': '<<street>>',
            'city': '<<city>>',
            'country': '<<country>>',
        },
        'createdAt': '<<datetime>>',
    },
    'product': {
        'id': '<<uuid>>',
        'name': '<<product>>',
        'price': '<<price>>',
        'description': '<<sentence>>',
        'company': '<<company>>',
        'color': '<<color>>',
        'image': '<<image>>',
    },
    'post': {
        'id': '<<uuid>>',
        'title': '<<sentence>>',
        'content': '<<paragraph>>',
        'author': '<<fullname>>',
        'publishedAt': '<<datetime>>',
        'views': '<<number>>',
    },
    'array': [
        {
            'id': '<<uuid>>',
            'name': '<<fullname>>',
            'email': '<<email>>',
        },
    ],
}


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def _fake_jwt(fake: Faker) -> str:
    header = {'alg': 'HS256', 'typ': 'JWT'}
    payload = {'sub': fake.uuid4(), 'name': fake.name(), 'iat': fake.unix_time()}
    signature = bytes.fromhex(fake.sha256())
    return '.'.join([
        _b64url(json.dumps(header, separators=(',', ':')).encode()),
        _b64url(json.dumps(payload, separators=(',', ':')).encode()),
        _b64url(signature),
    ])


def create_generator_table(
    seed: Optional[int] = None,
    locale: str = 'en_US',
    rng: Optional[random.Random] = None
) -> GeneratorTable:
    """
    Build the immutable tag → generator table.

    Args:
        seed: Seed for Faker and the numeric random source (None = unseeded)
        locale: Faker locale
        rng: Random source for numeric tags (defaults to random.Random(seed))

    Returns:
        Read-only mapping of tag name to zero-argument generator

    Example:
        table = create_generator_table(seed=42)
        expander = TagExpander(table)
    """
    fake = Faker(locale)
    if seed is not None:
        fake.seed_instance(seed)
    rng = rng or random.Random(seed)

    table: Dict[str, Callable[[], Any]] = {
        # Person
        'firstname': fake.first_name,
        'lastname': fake.last_name,
        'fullname': fake.name,
        'gender': lambda: rng.choice(('male', 'female')),
        'age': lambda: rng.randint(18, 80),
        'username': fake.user_name,
        'jobTitle': fake.job,
        # Contact
        'email': fake.email,
        'phone': fake.phone_number,
        # Location
        'country': fake.country,
        'city': fake.city,
        'street': fake.street_address,
        'address': lambda: fake.address().replace('\n', ', '),
        'zipcode': fake.postcode,
        # Date & time
        'date': lambda: fake.date_between(start_date='-30d', end_date='today').isoformat(),
        'datetime': lambda: fake.date_time_between(start_date='-30d', end_date='now').isoformat(),
        # Content
        'sentence': fake.sentence,
        'paragraph': fake.paragraph,
        'word': fake.word,
        'string': fake.word,
        # Internet
        'url': fake.url,
        'password': fake.password,
        'jwt': lambda: _fake_jwt(fake),
        # Numbers
        'number': lambda: rng.randint(0, 999),
        'float': lambda: round(rng.uniform(0, 1000), 2),
        'boolean': lambda: rng.random() > 0.5,
        'httpStatusCode': lambda: rng.choice(HTTP_STATUS_CODES),
        # Commerce
        'company': fake.company,
        'price': lambda: rng.randint(0, 9999) / 100,
        'product': lambda: f"{rng.choice(PRODUCT_ADJECTIVES)} {rng.choice(PRODUCT_NOUNS)}",
        'color': fake.color_name,
        # Media
        'image': fake.image_url,
        'avatar': lambda: f"https://i.pravatar.cc/150?u={fake.uuid4()}",
        # Data
        'uuid': fake.uuid4,
    }

    return MappingProxyType(table)


def has_tags(template: str) -> bool:
    """Check whether a template contains any ``<<tag>>`` placeholder."""
    return TAG_PATTERN.search(template) is not None


class TagExpander:
    """
    Expands ``<<tag>>`` placeholders in response templates.

    Substitution follows the tag's position in the document:
    - ``"<<age>>"`` (the whole JSON string) becomes the JSON encoding of the
      value, so numbers and booleans lose their quotes
    - any other tag is replaced by the value as text, JSON-escaped for
      strings so it stays valid inside the surrounding quotes

    Tags missing from the generator table are left untouched. Every tag
    occurrence calls its generator again, so two expansions of one
    template normally differ.

    Example:
        expander = TagExpander(create_generator_table(seed=1))
        body = expander.expand('{"id": "<<uuid>>", "name": "<<fullname>>"}')
    """

    def __init__(self, generators: Optional[GeneratorTable] = None):
        """
        Initialize tag expander.

        Args:
            generators: Tag → generator mapping (defaults to an unseeded Faker table)
        """
        self.generators = generators if generators is not None else create_generator_table()

    def _render(self, match: 're.Match') -> str:
        quoted_name, bare_name = match.group(1), match.group(2)
        generator = self.generators.get(quoted_name or bare_name)
        if generator is None:
            return match.group(0)

        value = generator()
        encoded = json.dumps(value, default=str)
        if quoted_name is not None or not isinstance(value, str):
            return encoded
        # Inside a larger string: drop the quotes json.dumps added
        return encoded[1:-1]

    def expand(self, template: str) -> str:
        """
        Expand all known tags in a template.

        Args:
            template: Raw template text

        Returns:
            Template with generated values substituted
        """
        if '<<' not in template:
            return template
        return TAG_PATTERN.sub(self._render, template)
