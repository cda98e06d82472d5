"""
Recipe Store API Connector
CRUD access to the remote recipe store over HTTP
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging

from recipe_core.errors import NotFoundError, TransientRemoteError
from .base_connector import BaseAPIConnector

logger = logging.getLogger(__name__)


class RecipeAPIConnector(BaseAPIConnector):
    """
    Connector for the remote recipe store

    Endpoints (relative to base_url):
        GET    /test-connection   -> {"connected": true, ...}
        GET    /recipes           -> [recipe row, ...]
        GET    /recipes/{id}      -> recipe row | 404
        POST   /recipes           -> created recipe row (201)
        PUT    /recipes/{id}      -> updated recipe row | 404
        DELETE /recipes/{id}      -> {"message": ...} | 404

    Rows are returned as received; decoding into Recipe objects happens in
    recipe_core.data.normalize.
    """

    HEALTH_ENDPOINT = "test-connection"
    RECIPES_ENDPOINT = "recipes"

    def _set_auth_header(self):
        """Set bearer token for the recipe store"""
        if self.config.api_key:
            self.session.headers.update({
                "Authorization": f"Bearer {self.config.api_key}",
            })

    def _recipe_endpoint(self, recipe_id: str) -> str:
        return f"{self.RECIPES_ENDPOINT}/{quote(str(recipe_id), safe='')}"

    # =========================================================================
    # HEALTH
    # =========================================================================

    def check_health(self) -> bool:
        """
        Single probe of the health endpoint, never retried and never raising.

        True only for a 2xx JSON body reporting ``connected: true`` or
        ``success: true``; an explicit ``connected: false`` wins.
        """
        try:
            response = self._make_request(
                self.HEALTH_ENDPOINT,
                method="GET",
                timeout=self.config.probe_timeout,
            )
            body = response.json()
        except TransientRemoteError as e:
            logger.info(f"Recipe store unreachable: {e.message}")
            return False
        except ValueError as e:
            logger.info(f"Recipe store health response was not JSON: {e}")
            return False

        if not isinstance(body, dict):
            return False
        if body.get("connected") is False:
            return False
        return body.get("connected") is True or body.get("success") is True

    # =========================================================================
    # READS
    # =========================================================================

    def fetch_recipes(self) -> List[Dict[str, Any]]:
        """Fetch every recipe row, retrying transient failures"""
        def call() -> List[Dict[str, Any]]:
            response = self._make_request(
                self.RECIPES_ENDPOINT,
                method="GET",
                timeout=self.config.read_timeout,
            )
            rows = self._json(response, self.RECIPES_ENDPOINT)
            if not isinstance(rows, list):
                raise TransientRemoteError(
                    f"Expected a list of recipes, got {type(rows).__name__}",
                    status_code=response.status_code,
                    endpoint=f"GET {self.RECIPES_ENDPOINT}",
                )
            return rows

        rows = self._with_retry(call)
        logger.info(f"Fetched {len(rows)} recipes from {self.config.api_name}")
        return rows

    def fetch_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch one recipe row.

        Returns:
            The row, or None when the store answers 404
        """
        endpoint = self._recipe_endpoint(recipe_id)

        def call() -> Optional[Dict[str, Any]]:
            response = self._make_request(
                endpoint,
                method="GET",
                timeout=self.config.read_timeout,
                allow_not_found=True,
            )
            if response.status_code == 404:
                return None
            return self._json(response, endpoint)

        return self._with_retry(call)

    # =========================================================================
    # WRITES
    # =========================================================================

    def create_recipe(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        def call() -> Dict[str, Any]:
            response = self._make_request(
                self.RECIPES_ENDPOINT,
                method="POST",
                timeout=self.config.write_timeout,
                data=payload,
            )
            return self._json(response, self.RECIPES_ENDPOINT)

        row = self._with_retry(call)
        logger.info(f"Created recipe {row.get('id') if isinstance(row, dict) else '?'}")
        return row

    def update_recipe(self, recipe_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit a partial update.

        Raises:
            NotFoundError: The store has no recipe with this id (not retried)
            TransientRemoteError: All attempts failed
        """
        endpoint = self._recipe_endpoint(recipe_id)

        def call() -> Dict[str, Any]:
            response = self._make_request(
                endpoint,
                method="PUT",
                timeout=self.config.write_timeout,
                data=changes,
                allow_not_found=True,
            )
            if response.status_code == 404:
                raise NotFoundError(f"Recipe {recipe_id} not found", recipe_id=recipe_id)
            return self._json(response, endpoint)

        return self._with_retry(call)

    def delete_recipe(self, recipe_id: str) -> bool:
        """
        Delete a recipe.

        Returns:
            True if deleted, False if the store had no such recipe
        """
        endpoint = self._recipe_endpoint(recipe_id)

        def call() -> bool:
            response = self._make_request(
                endpoint,
                method="DELETE",
                timeout=self.config.write_timeout,
                allow_not_found=True,
            )
            return response.status_code != 404

        deleted = self._with_retry(call)
        if not deleted:
            logger.info(f"Recipe {recipe_id} was already absent from the remote store")
        return deleted
