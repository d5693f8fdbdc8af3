"""
Admin panel for carrier services.

The panel shows the shop's carrier services, a creation modal and a
"populate products" action. Its creation flow is an explicit state machine:

    IDLE        -> MODAL_OPEN    open_modal()
    MODAL_OPEN  -> IDLE          close_modal() (cancel)
    MODAL_OPEN  -> ERROR_SHOWN   submit() with a duplicate name, no backend call
    MODAL_OPEN  -> SUBMITTING    submit()
    SUBMITTING  -> IDLE          creation succeeded
    SUBMITTING  -> ERROR_SHOWN   creation failed
    ERROR_SHOWN -> MODAL_OPEN    a form field was edited
    ERROR_SHOWN -> IDLE          close_modal()

The panel talks to a backend object; ``ServiceBackend`` binds it to the
in-process managers for one merchant session.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from config import PANEL_MESSAGES, PRODUCT_BATCH_SIZE
from carrier.carrier_services import get_carrier_service_manager
from carrier.errors import CarrierAppError, DuplicateNameError
from carrier.product_seeder import get_product_seeder
from carrier.session import MerchantSession

logger = logging.getLogger(__name__)


class PanelState(Enum):
    IDLE = "idle"
    MODAL_OPEN = "modal_open"
    SUBMITTING = "submitting"
    ERROR_SHOWN = "error_shown"


class ServiceBackend:
    """Panel backend calling the managers directly for one session."""

    def __init__(self, session: MerchantSession, manager=None, seeder=None):
        self.session = session
        self.manager = manager or get_carrier_service_manager()
        self.seeder = seeder or get_product_seeder()

    def get_product_count(self) -> int:
        return self.seeder.count_products(self.session)

    def list_carrier_services(self) -> List[Dict[str, Any]]:
        return self.manager.list_carrier_services(self.session)

    def create_carrier_service(self, name: str, callback_url: str) -> Dict[str, Any]:
        return self.manager.create_carrier_service(self.session, name, callback_url)

    def create_products(self) -> int:
        return self.seeder.seed_products(self.session)


class CarrierPanel:
    """
    State of the carrier service panel.

    Usage:
        panel = CarrierPanel(ServiceBackend(session))
        panel.load()
        panel.open_modal()
        panel.set_name("DHL")
        panel.set_callback_url("https://example.com/rates")
        panel.submit()
    """

    def __init__(self, backend, products_count: int = PRODUCT_BATCH_SIZE):
        self.backend = backend
        self.products_count = products_count

        self.state = PanelState.IDLE
        self.carrier_services: List[Dict[str, Any]] = []
        self.product_count: Optional[int] = None

        # Modal form fields
        self.name = ""
        self.callback_url = ""

        self.error_message = ""
        self.success_message = ""
        self.toast: Optional[Dict[str, Any]] = None

        # Gates the populate and create actions until loaded, and while a call is in flight
        self.is_loading = True

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        self.refresh_product_count()
        self.refresh_carrier_services()
        self.is_loading = False

    def refresh_product_count(self) -> None:
        try:
            self.product_count = self.backend.get_product_count()
        except CarrierAppError as e:
            logger.error(f"Could not load product count: {e.message}")

    def refresh_carrier_services(self) -> None:
        try:
            self.carrier_services = self.backend.list_carrier_services()
        except CarrierAppError as e:
            logger.error(f"Could not load carrier services: {e.message}")

    # ------------------------------------------------------------------
    # Creation modal
    # ------------------------------------------------------------------

    @property
    def is_modal_open(self) -> bool:
        return self.state is not PanelState.IDLE

    @property
    def can_submit(self) -> bool:
        return self.state is PanelState.MODAL_OPEN

    def open_modal(self) -> bool:
        """Open the creation modal. Refused until the panel has loaded."""
        if self.is_loading or self.state is not PanelState.IDLE:
            return False
        self.state = PanelState.MODAL_OPEN
        self.error_message = ""
        self.success_message = ""
        return True

    def close_modal(self) -> bool:
        """Cancel the modal. Not allowed while a submission is in flight."""
        if self.state is PanelState.SUBMITTING:
            return False
        self._reset_modal()
        return True

    def _reset_modal(self) -> None:
        self.state = PanelState.IDLE
        self.name = ""
        self.callback_url = ""
        self.error_message = ""
        self.success_message = ""

    def set_name(self, value: str) -> None:
        self.name = value or ""
        self._clear_error()

    def set_callback_url(self, value: str) -> None:
        self.callback_url = value or ""
        self._clear_error()

    def _clear_error(self) -> None:
        if self.state is PanelState.ERROR_SHOWN:
            self.state = PanelState.MODAL_OPEN
            self.error_message = ""

    def _show_error(self, message: str) -> None:
        self.state = PanelState.ERROR_SHOWN
        self.error_message = message

    def name_exists(self, name: str) -> bool:
        return name in {s.get("name") for s in self.carrier_services}

    def submit(self) -> bool:
        """
        Create the carrier service from the modal fields.

        Returns:
            True if the carrier service was created
        """
        if not self.can_submit:
            return False

        name = self.name.strip()
        callback_url = self.callback_url.strip()

        if self.name_exists(name):
            self._show_error(PANEL_MESSAGES["duplicate_name"])
            return False

        self.state = PanelState.SUBMITTING
        self.is_loading = True
        try:
            self.backend.create_carrier_service(name, callback_url)
        except DuplicateNameError:
            self._show_error(PANEL_MESSAGES["duplicate_name"])
            return False
        except CarrierAppError as e:
            logger.error(f"Carrier service creation failed: {e.message}")
            self._show_error(f"{PANEL_MESSAGES['carrier_error']}: {e.message}")
            return False
        finally:
            self.is_loading = False

        self._reset_modal()
        self.success_message = PANEL_MESSAGES["carrier_created"].format(
            name=name,
            callback_url=callback_url,
        )
        self.refresh_carrier_services()
        return True

    @property
    def banner(self) -> Optional[Dict[str, str]]:
        if self.error_message:
            return {"status": "critical", "message": self.error_message}
        if self.success_message:
            return {"status": "success", "message": self.success_message}
        return None

    # ------------------------------------------------------------------
    # Sample products
    # ------------------------------------------------------------------

    def populate_products(self) -> bool:
        """Seed sample products. Refused while loading or while a creation is in flight."""
        if self.is_loading or self.state is PanelState.SUBMITTING:
            return False

        self.is_loading = True
        try:
            self.backend.create_products()
        except CarrierAppError as e:
            logger.error(f"Product seeding failed: {e.message}")
            self.is_loading = False
            self.toast = {"content": PANEL_MESSAGES["products_error"], "error": True}
            return False

        self.refresh_product_count()
        self.is_loading = False
        self.toast = {
            "content": PANEL_MESSAGES["products_created"].format(count=self.products_count),
            "error": False,
        }
        return True

    def dismiss_toast(self) -> None:
        self.toast = None
