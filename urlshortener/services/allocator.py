"""Identifier allocation for new short URL mappings

Classes:
    IdentifierAllocator:
        Pick a shortcode for a new mapping, either randomly generated or
        supplied by the caller, and reject shortcodes that are already in use.

Example:
    >>> allocator = IdentifierAllocator(ShortURLRedisDAO(store))
    >>> allocator.allocate()
    'q7RbT2'
    >>> allocator.allocate(custom='my-link')
    'my-link'
"""

import logging

from urlshortener.constants import Shortcode
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.exceptions import IdentifierInUseError, InvalidShortcodeError
from urlshortener.utils.shortener import generate_shortcode
from urlshortener.utils.validators import is_valid_custom_shortcode


logger = logging.getLogger(__name__)


class IdentifierAllocator:
    """Allocate shortcodes for new mappings

    NOTE: the existence check done here only rejects taken shortcodes early.
          The actual claim is the conditional write done by
          ShortURLBaseDAO.insert(), which is what makes a shortcode belong
          to exactly one mapping.

    Attributes:
        short_url_dao (ShortURLBaseDAO):
            DAO used to look up existing mappings.
        length (int):
            Length of generated shortcodes.
    """

    def __init__(self, short_url_dao: ShortURLBaseDAO, length: int = Shortcode.LENGTH):
        self.short_url_dao = short_url_dao
        self.length = length

    def allocate(self, custom: str | None = None) -> str:
        """Return a shortcode that isn't mapped to an unexpired URL

        Args:
            custom (str | None):
                Caller-supplied shortcode. A random shortcode is generated when
                None or empty.

        Returns:
            str: shortcode to persist the new mapping under

        Raises:
            InvalidShortcodeError:
                If `custom` isn't 1-64 characters of [A-Za-z0-9_-].
            IdentifierInUseError:
                If the shortcode is already mapped (custom or generated alike).
            DataStoreError:
                If the data store is unavailable.
        """
        if custom:
            if not is_valid_custom_shortcode(custom):
                raise InvalidShortcodeError(
                    f"Invalid custom shortcode '{custom}': use 1-{Shortcode.MAX_CUSTOM_LENGTH} letters, digits, '-' or '_'."
                )
            shortcode = custom
        else:
            shortcode = generate_shortcode(self.length)

        if self.short_url_dao.exists(shortcode):
            logger.info('Shortcode already in use.', extra={'shortcode': shortcode, 'custom': bool(custom)})
            raise IdentifierInUseError(shortcode)

        return shortcode
