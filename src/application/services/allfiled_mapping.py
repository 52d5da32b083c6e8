"""Allfiled Mapping Service.

Maps and converts identifiers between Allfiled data XRIs and XDI data XRIs:

    Allfiled data XRI   +(personal)+(person)$!(+(forename))
    XDI data XRI        +first$!(+name)

An Allfiled data XRI is always a category/file/field triple. Conversions
reduce each segment to its base form, translate it to a dictionary segment,
look the resulting path up in the mapping graph, and rebuild the result
from the path of the canonical (or equivalent) node.

Usage:
    mapping = AllfiledMapping.default()
    mapping.allfiled_data_xri_to_xdi_data_xri("+(personal)+(person)$!(+(forename))")
    # -> Identifier for +first$!(+name)
"""

import logging
from typing import Optional, Union

from application.services.dictionary_index import DictionaryIndex, get_dictionary_index
from config.mapping_config import DEFAULT_ALLFILED_CONTEXT, get_mapping_config
from domain.dictionary import native_identifier_to_instance
from domain.exceptions import ConfigurationError, InvalidArgumentError, NoEquivalenceDeclaredError
from domain.identifiers import Identifier, IdentifierBuilder, Segment, as_identifier
from domain.multiplicity import attribute_singleton, base_form, decorate_path
from infrastructure.memory_graph import MappingGraph

logger = logging.getLogger(__name__)

XriLike = Union[Identifier, Segment, str]

CATEGORY, FILE, FIELD = 0, 1, 2
TRIPLE_LENGTH = 3


class AllfiledMapping:
    """Bidirectional mapping between Allfiled and XDI data XRIs."""

    def __init__(
        self,
        index: DictionaryIndex,
        allfiled_context: XriLike = DEFAULT_ALLFILED_CONTEXT,
    ):
        """
        Initialize the mapping.

        Args:
            index: Dictionary index holding the loaded mapping graph
            allfiled_context: Root of the Allfiled dictionary namespace
        """
        self._index = index
        self.allfiled_context = as_identifier(allfiled_context)

    @classmethod
    def default(cls) -> "AllfiledMapping":
        """Mapping over the shared dictionary index and configured context."""
        config = get_mapping_config()
        return cls(get_dictionary_index(config.mapping_path), config.allfiled_context)

    # --- Triple decomposition ---

    def allfiled_data_xri_to_category_identifier(self, allfiled_data_xri: XriLike) -> str:
        """
        Converts an Allfiled data XRI to a native Allfiled category identifier.
        Example: +(personal)+(person)$!(+(forename)) --> personal
        """
        return self._native_identifier_at(allfiled_data_xri, CATEGORY)

    def allfiled_data_xri_to_file_identifier(self, allfiled_data_xri: XriLike) -> str:
        """
        Converts an Allfiled data XRI to a native Allfiled file identifier.
        Example: +(personal)+(person)$!(+(forename)) --> person
        """
        return self._native_identifier_at(allfiled_data_xri, FILE)

    def allfiled_data_xri_to_field_identifier(self, allfiled_data_xri: XriLike) -> str:
        """
        Converts an Allfiled data XRI to a native Allfiled field identifier.
        Example: +(personal)+(person)$!(+(forename)) --> forename
        """
        return self._native_identifier_at(allfiled_data_xri, FIELD)

    def allfiled_identifiers_to_allfiled_data_xri(self, category: str, file: str, field: str) -> Identifier:
        """
        Builds an Allfiled data XRI from native identifiers.
        Example: personal, person, forename --> +(personal)+(person)$!(+(forename))
        """
        builder = IdentifierBuilder()
        builder.append(native_identifier_to_instance(category))
        builder.append(native_identifier_to_instance(file))
        builder.append(attribute_singleton(native_identifier_to_instance(field)))
        allfiled_data_xri = builder.build()

        logger.debug(f"Converted {category}/{file}/{field} to {allfiled_data_xri}")
        return allfiled_data_xri

    # --- Mapping ---

    def allfiled_data_xri_to_xdi_data_xri(self, allfiled_data_xri: XriLike) -> Optional[Identifier]:
        """
        Maps and converts an Allfiled data XRI to an XDI data XRI.
        Example: +(personal)+(person)$!(+(forename)) --> +first$!(+name)

        Returns:
            The XDI data XRI, or None if the mapping graph defines no equivalence

        Raises:
            InvalidArgumentError: If the input is not a valid identifier
            ConfigurationError: If the mapped node has no valid data XRI form
        """
        allfiled_data_xri = as_identifier(allfiled_data_xri)

        allfiled_dictionary_xri = self.allfiled_context.concat(self._to_dictionary_xri(allfiled_data_xri))
        allfiled_dictionary_node = self._index.find_node(allfiled_dictionary_xri)
        if allfiled_dictionary_node is None:
            logger.debug(f"No mapping for {allfiled_data_xri}: {allfiled_dictionary_xri} not found")
            return None

        xdi_dictionary_node = self._index.canonical_of(allfiled_dictionary_node)
        if xdi_dictionary_node is allfiled_dictionary_node:
            logger.debug(f"No mapping for {allfiled_data_xri}: {allfiled_dictionary_xri} has no canonical form")
            return None

        xdi_data_xri = self._to_data_xri(xdi_dictionary_node.path)

        logger.debug(f"Mapped and converted {allfiled_data_xri} to {xdi_data_xri}")
        return xdi_data_xri

    def xdi_data_xri_to_allfiled_data_xri(self, xdi_data_xri: XriLike) -> Optional[Identifier]:
        """
        Maps and converts an XDI data XRI to an Allfiled data XRI.
        Example: +first$!(+name) --> +(personal)+(person)$!(+(forename))

        Returns:
            The Allfiled data XRI, or None if the mapping graph defines no equivalence

        Raises:
            InvalidArgumentError: If the input is not a valid identifier
            ConfigurationError: If the mapped node has no valid data XRI form
        """
        xdi_data_xri = as_identifier(xdi_data_xri)

        xdi_dictionary_xri = self._to_dictionary_xri(xdi_data_xri)
        xdi_dictionary_node = self._index.find_node(xdi_dictionary_xri)
        if xdi_dictionary_node is None:
            logger.debug(f"No mapping for {xdi_data_xri}: {xdi_dictionary_xri} not found")
            return None

        try:
            allfiled_dictionary_node = self._index.first_equivalent_of(
                xdi_dictionary_node, namespace=self.allfiled_context
            )
        except NoEquivalenceDeclaredError as ex:
            logger.debug(f"No mapping for {xdi_data_xri}: {ex}")
            return None

        # the Allfiled context segments are structural, not data
        allfiled_dictionary_xri = self._strip_context(allfiled_dictionary_node.path)
        if allfiled_dictionary_xri is None:
            logger.debug(f"No mapping for {xdi_data_xri}: equivalent is the Allfiled context itself")
            return None

        allfiled_data_xri = self._to_data_xri(allfiled_dictionary_xri)

        logger.debug(f"Mapped and converted {xdi_data_xri} to {allfiled_data_xri}")
        return allfiled_data_xri

    # --- Getters and setters ---

    @property
    def index(self) -> DictionaryIndex:
        return self._index

    @property
    def mapping_graph(self) -> MappingGraph:
        return self._index.mapping_graph

    def set_mapping_graph(self, mapping_graph: MappingGraph) -> None:
        self._index.set_mapping_graph(mapping_graph)

    # --- Helpers ---

    def _native_identifier_at(self, allfiled_data_xri: XriLike, position: int) -> str:
        allfiled_data_xri = as_identifier(allfiled_data_xri)
        if allfiled_data_xri.segment_count != TRIPLE_LENGTH:
            raise InvalidArgumentError(
                f"Allfiled data XRI must have {TRIPLE_LENGTH} segments, "
                f"{allfiled_data_xri} has {allfiled_data_xri.segment_count}"
            )

        native_identifier = self._index.native_identifier(base_form(allfiled_data_xri.segment_at(position)))

        logger.debug(f"Converted {allfiled_data_xri} to {native_identifier}")
        return native_identifier

    def _to_dictionary_xri(self, data_xri: Identifier) -> Identifier:
        return Identifier.of(
            self._index.native_to_dictionary_path(base_form(segment)) for segment in data_xri.segments
        )

    def _to_data_xri(self, dictionary_xri: Identifier) -> Identifier:
        try:
            return decorate_path(
                self._index.dictionary_path_to_native(segment) for segment in dictionary_xri.segments
            )
        except InvalidArgumentError as ex:
            raise ConfigurationError(f"Mapping graph node {dictionary_xri} has no valid data XRI: {ex}") from ex

    def _strip_context(self, dictionary_xri: Identifier) -> Optional[Identifier]:
        remaining = dictionary_xri.segments[self.allfiled_context.segment_count:]
        if not remaining:
            return None
        return Identifier(segments=remaining)
