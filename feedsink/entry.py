# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
A small Atom entry model over xml.etree.ElementTree. Documents received
from a server are parsed with defusedxml. The model only knows the standard
entry elements that a stream record can carry; anything else found in a
retrieved entry is left untouched so that an update does not lose it.
"""
import logging
from datetime import datetime, timezone
from xml.etree.ElementTree import Element, SubElement, ParseError, \
    register_namespace, tostring

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring as safe_fromstring

logger = logging.getLogger(__name__)

ATOM_NS = 'http://www.w3.org/2005/Atom'
register_namespace('', ATOM_NS)

# elements that are plain text children of <entry>
TEXT_ELEMENTS = ('id', 'title', 'updated', 'published', 'summary',
                 'content', 'rights')
ENTRY_ELEMENTS = ('id', 'title', 'link', 'updated', 'author', 'published',
                  'summary', 'content', 'rights', 'category')


def _q(name):
    return '{%s}%s' % (ATOM_NS, name)


def _rfc3339(dt):
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat(timespec='seconds')


class EntryFormatError(ValueError):
    pass


class Entry:
    """An Atom <entry> document. Standard elements are read and written by
    name with get() and set().
    """
    def __init__(self, element=None):
        self.element = element if element is not None else Element(_q('entry'))

    @staticmethod
    def from_xml(data):
        """Parse an entry document received from a server. Documents with a
        DTD or entity declarations are refused.
        """
        try:
            root = safe_fromstring(data, forbid_dtd=True)
        except ParseError as e:
            raise EntryFormatError("Entry document is not well formed: %s" % e) from e
        except DefusedXmlException as e:
            raise EntryFormatError("Entry document refused: %r" % e) from e
        if root.tag!=_q('entry'):
            raise EntryFormatError("Expecting an Atom entry document, root element is %s" %
                                   root.tag)
        return Entry(root)

    def _first_link(self):
        for link in self.element.findall(_q('link')):
            if link.get('rel', 'alternate')=='alternate':
                return link
        return None

    def get(self, name):
        if name in TEXT_ELEMENTS:
            child = self.element.find(_q(name))
            return child.text if child is not None else None
        elif name=='link':
            link = self._first_link()
            return link.get('href') if link is not None else None
        elif name=='author':
            return self.element.findtext('%s/%s' % (_q('author'), _q('name')))
        elif name=='category':
            category = self.element.find(_q('category'))
            return category.get('term') if category is not None else None
        raise KeyError(name)

    def set(self, name, value):
        value = str(value)
        if name in TEXT_ELEMENTS:
            child = self.element.find(_q(name))
            if child is None:
                child = SubElement(self.element, _q(name))
            child.text = value
        elif name=='link':
            link = self._first_link()
            if link is None:
                link = SubElement(self.element, _q('link'), rel='alternate')
            link.set('href', value)
        elif name=='author':
            author = self.element.find(_q('author'))
            if author is None:
                author = SubElement(self.element, _q('author'))
            author_name = author.find(_q('name'))
            if author_name is None:
                author_name = SubElement(author, _q('name'))
            author_name.text = value
        elif name=='category':
            category = self.element.find(_q('category'))
            if category is None:
                category = SubElement(self.element, _q('category'))
            category.set('term', value)
        else:
            raise KeyError(name)

    def set_published(self, dt):
        self.set('published', _rfc3339(dt))

    def set_updated(self, dt):
        self.set('updated', _rfc3339(dt))

    def fields(self):
        result = {}
        for name in ENTRY_ELEMENTS:
            value = self.get(name)
            if value is not None:
                result[name] = value
        return result

    def to_xml(self):
        return tostring(self.element, encoding='utf-8', xml_declaration=True)

    def __repr__(self):
        return 'Entry(%r)' % self.fields()


def build_entry(fields, base=None):
    """Copy the standard entry elements in fields onto base, or onto a new
    entry. Elements of base that are not in fields keep their values.
    """
    entry = base if base is not None else Entry()
    for (name, value) in fields.items():
        if value is None:
            continue
        if name not in ENTRY_ELEMENTS:
            logger.debug("Skipping field '%s', not an Atom entry element", name)
            continue
        entry.set(name, value)
    return entry


def now():
    return datetime.now(timezone.utc)
