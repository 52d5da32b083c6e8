# src/composition_root.py

import logging
from typing import Optional

from application.services.allfiled_mapping import AllfiledMapping
from application.services.dictionary_index import DictionaryIndex, get_dictionary_index
from config.mapping_config import MappingConfig, get_mapping_config

logger = logging.getLogger(__name__)


def configure_logging(config: Optional[MappingConfig] = None) -> None:
    """Configure root logging from the mapping config."""
    config = config or get_mapping_config()
    logging.basicConfig(
        level=config.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def bootstrap_dictionary_index(config: Optional[MappingConfig] = None, shared: bool = True) -> DictionaryIndex:
    """Loads the dictionary index.

    Args:
        config: Mapping configuration; the global one when omitted
        shared: Reuse the process-wide index instead of loading a private one
    """
    config = config or get_mapping_config()
    if shared:
        return get_dictionary_index(config.mapping_path)
    return DictionaryIndex.from_resource(config.mapping_path)


def bootstrap_mapping(config: Optional[MappingConfig] = None, shared: bool = True) -> AllfiledMapping:
    """Creates the Allfiled mapping with its dictionary index."""
    config = config or get_mapping_config()
    index = bootstrap_dictionary_index(config, shared=shared)
    logger.info(f"Allfiled mapping ready ({index.mapping_graph!r}, context {config.allfiled_context})")
    return AllfiledMapping(index, allfiled_context=config.allfiled_context)
