"""POS use cases: CRUD and import from OpenStreetMap."""

from __future__ import annotations

import logging

from campus_coffee.common.errors import DuplicatePosNameError
from campus_coffee.common.logging import get_logger, log_event
from campus_coffee.common.models import Pos
from campus_coffee.osm.fetcher import OsmDataService
from campus_coffee.pipeline.convert import convert_osm_node_to_pos
from campus_coffee.storage.pos_store import PosStore


class PosService:
    def __init__(
        self,
        store: PosStore,
        osm_data_service: OsmDataService,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.osm_data_service = osm_data_service
        self.logger = logger or get_logger("service")

    def clear(self) -> None:
        log_event(self.logger, "clearing all POS data", level=logging.WARNING, event="POS_CLEAR")
        self.store.clear()

    def get_all(self) -> list[Pos]:
        log_event(self.logger, "retrieving all POS", level=logging.DEBUG, event="POS_LIST")
        return self.store.get_all()

    def get_by_id(self, pos_id: int) -> Pos:
        log_event(self.logger, f"retrieving POS with ID: {pos_id}", level=logging.DEBUG, pos_id=pos_id, event="POS_GET")
        return self.store.get_by_id(pos_id)

    def upsert(self, pos: Pos) -> Pos:
        if pos.id is None:
            log_event(self.logger, f"creating new POS: {pos.name}", event="POS_CREATE")
        else:
            log_event(self.logger, f"updating POS with ID: {pos.id}", pos_id=pos.id, event="POS_UPDATE")
            # Raises PosNotFoundError before anything is written.
            self.store.get_by_id(pos.id)
        return self._perform_upsert(pos)

    def import_from_osm_node(self, node_id: int) -> Pos:
        log_event(self.logger, f"importing POS from OpenStreetMap node {node_id}", node_id=node_id, event="OSM_IMPORT_START")

        node = self.osm_data_service.fetch_node(node_id)
        draft = convert_osm_node_to_pos(node, logger=self.logger)
        saved = self.upsert(draft)

        log_event(
            self.logger,
            f"imported POS '{saved.name}' from OSM node {node_id}",
            node_id=node_id,
            pos_id=saved.id,
            event="OSM_IMPORT_END",
            status="ok",
        )
        return saved

    def _perform_upsert(self, pos: Pos) -> Pos:
        try:
            saved = self.store.upsert(pos)
        except DuplicatePosNameError as exc:
            log_event(
                self.logger,
                f"error upserting POS '{pos.name}': {exc}",
                level=logging.ERROR,
                pos_id=pos.id,
                event="POS_UPSERT_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            raise
        log_event(self.logger, f"upserted POS with ID: {saved.id}", pos_id=saved.id, event="POS_UPSERT", status="ok")
        return saved
