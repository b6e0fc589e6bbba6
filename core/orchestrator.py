"""
Scenario Orchestrator — Runs the multiple shipping addresses tutorial against commercetools.

This module ties together the other modules (ClientCredentialsAuth,
CommercetoolsClient, VersionedMutationPipeline, OutputManager) into a
sequential 4-step workflow:

  Step 1: AUTHENTICATION
      Obtains a bearer token via the client credentials flow with the
      manage_project:{projectKey} scope, then fetches the project settings.

  Step 2: SETUP PRODUCT
      Creates a product type, a tax category (19% DE, included in price) and
      a published product with one EUR price.

  Step 3: SCENARIO 1 - LINE ITEM ALREADY IN THE CART
      Creates a cart with one line item, adds two item shipping addresses and
      distributes the line item quantity over both.

  Step 4: SCENARIO 2 - MANAGING A LINE ITEM
      On the same cart: removes the line item, adds one with shipping details,
      reduces its quantity together with the shipping details, and sets
      absolute quantities.

Every cart update goes through a VersionedMutationPipeline, so each request
carries the version returned by the previous one. The first failure stops the
run; remote resources already created are left as they are.

Configuration:
    All settings are loaded from environment variables (typically via .env file).
    Required: CTP_AUTH_URL, CTP_API_URL, CTP_PROJECT_KEY, CTP_CLIENT_ID, CTP_CLIENT_SECRET.
    See config/settings.py for defaults.

Typical usage:
    orchestrator = ShippingScenarioOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

import os
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional

from dotenv import load_dotenv

from .auth import ClientCredentialsAuth, scope_for_project
from .ctp_client import CommercetoolsClient
from .drafts import (
    Address,
    CartDraft,
    LineItemDraft,
    ProductDraft,
    ProductTypeDraft,
    TaxCategoryDraft,
    TaxRateDraft,
)
from .errors import PipelineAbortedError
from .json_query import extract, project_cart, shipping_target_total
from .output_manager import OutputManager
from .pipeline import VersionHandle, VersionedMutationPipeline
from .scenario_steps import (
    FIRST_LINE_ITEM_ID_PATH,
    LINE_ITEM_ID,
    PRODUCT_ID,
    existing_line_item_steps,
    managed_line_item_steps,
)

from config import (
    DEFAULT_SETTINGS,
    REQUIRED_ENV_VARS,
    CURRENCY,
    COUNTRY,
    LOCALE,
    PRODUCT_CENT_AMOUNT,
    TAX_RATE,
    SHIPPING_ADDRESSES,
    FIRST_ADDRESS_SHARE,
)


def _random_suffix() -> int:
    return random.randint(0, 32767)


def _banner(title: str):
    print(f"\n{'='*60}")
    print(title)
    print("="*60)


class ShippingScenarioOrchestrator:
    """Orchestrates the multiple shipping addresses scenarios.

    Attributes:
        auth_url: commercetools auth endpoint (e.g., "https://auth.europe-west1.gcp.commercetools.com").
        api_url: commercetools API endpoint (e.g., "https://api.europe-west1.gcp.commercetools.com").
        project_key: Project the scenarios run in.
        client_id / client_secret: API client credentials (needs manage_project scope).
        save_json: Whether to write request/response snapshots to disk (default: True).
        debug: Whether to enable verbose output (default: False).
        request_timeout: Per-request timeout in seconds.
        cart_quantity: Line item quantity used by both scenarios.
        output_manager: Handles timestamped output directories and retention cleanup.
    """

    def __init__(self, env_file: str = "./.env"):
        """Initialize the orchestrator by loading configuration from environment.

        Args:
            env_file: Path to a .env file. If the file exists, it is loaded via
                      python-dotenv. Otherwise, falls back to system environment.
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            print(f"Loaded configuration from: {env_file}")
        else:
            print(f"Warning: {env_file} not found, using defaults/environment")

        # commercetools connection settings (required)
        self.auth_url = os.getenv("CTP_AUTH_URL", "")
        self.api_url = os.getenv("CTP_API_URL", "")
        self.project_key = os.getenv("CTP_PROJECT_KEY", "")
        self.client_id = os.getenv("CTP_CLIENT_ID", "")
        self.client_secret = os.getenv("CTP_CLIENT_SECRET", "")

        self.run_name = os.getenv("RUN_NAME", DEFAULT_SETTINGS["RUN_NAME"])
        output_dir = os.getenv("OUTPUT_DIR", DEFAULT_SETTINGS["OUTPUT_DIR"])
        self._config_errors = []
        retention_days = self._read_number("OUTPUT_RETENTION_DAYS", int)

        # Processing options
        self.save_json = os.getenv("SAVE_JSON", str(DEFAULT_SETTINGS["SAVE_JSON"])).lower() == "true"
        self.debug = os.getenv("DEBUG", str(DEFAULT_SETTINGS["DEBUG"])).lower() == "true"
        self.request_timeout = self._read_number("REQUEST_TIMEOUT", float)
        self.cart_quantity = self._read_number("CART_QUANTITY", int)
        self.user_agent = os.getenv("USER_AGENT", DEFAULT_SETTINGS["USER_AGENT"])

        self.addresses = [Address.from_dict(a) for a in SHIPPING_ADDRESSES]

        self.output_manager = OutputManager(output_dir, self.run_name, retention_days)

    def _read_number(self, name: str, cast):
        """Parse a numeric setting; malformed values are reported by validate_config()."""
        raw = os.getenv(name, str(DEFAULT_SETTINGS[name]))
        try:
            return cast(raw)
        except ValueError:
            self._config_errors.append(f"{name} must be a number, got '{raw}'")
            return cast(DEFAULT_SETTINGS[name])

    def validate_config(self) -> bool:
        """Validate that all required configuration values are present.

        Checks:
            - CTP_AUTH_URL, CTP_API_URL, CTP_PROJECT_KEY are set
            - CTP_CLIENT_ID and CTP_CLIENT_SECRET are set
            - OUTPUT_RETENTION_DAYS, REQUEST_TIMEOUT, CART_QUANTITY are numbers
            - CART_QUANTITY is at least 2 (one unit per shipping address)

        Returns:
            True if the configuration is usable, False otherwise.
            Prints specific error messages for each problem.
        """
        values = {
            "CTP_AUTH_URL": self.auth_url,
            "CTP_API_URL": self.api_url,
            "CTP_PROJECT_KEY": self.project_key,
            "CTP_CLIENT_ID": self.client_id,
            "CTP_CLIENT_SECRET": self.client_secret,
        }
        errors = [f"{name} is required" for name in REQUIRED_ENV_VARS if not values[name]]
        errors.extend(self._config_errors)

        if self.cart_quantity < len(self.addresses):
            errors.append(f"CART_QUANTITY must be at least {len(self.addresses)}")

        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def build_client(self) -> CommercetoolsClient:
        auth = ClientCredentialsAuth(
            self.auth_url,
            self.client_id,
            self.client_secret,
            scope_for_project(self.project_key),
            timeout=self.request_timeout,
            debug=self.debug,
        )
        return CommercetoolsClient(
            self.api_url,
            self.project_key,
            auth,
            user_agent=self.user_agent,
            timeout=self.request_timeout,
            debug=self.debug,
        )

    def run(self, client: Optional[CommercetoolsClient] = None) -> Dict[str, Any]:
        """Execute setup and both scenarios.

        Args:
            client: Optional pre-built client (defaults to build_client()).

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - config: API URL, project key, cart quantity
                - success: True if all steps completed without error
                - steps: Names of the steps that completed, in order
                - cart: Final cart projection (if a cart was created)
                - checks: Shipping target totals observed after each scenario
                - artifacts_dir: Snapshot directory (if any snapshot was written)
                - error / failed_step / status_code: On failure
        """
        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "config": {
                "api_url": self.api_url,
                "project_key": self.project_key,
                "cart_quantity": self.cart_quantity,
            },
            "success": False,
            "steps": [],
            "checks": {},
        }
        # Snapshot directory is created on the first write; failures there only warn
        sink = self.output_manager if self.save_json else None

        try:
            # Step 1: Authenticate and check the project is reachable
            _banner("STEP 1: AUTHENTICATION")
            client = client or self.build_client()
            client.authenticate()
            project = client.get_project()
            print(f"  Authenticated for project: {project.get('key', self.project_key)}")
            results["steps"].append("authenticate")

            # Step 2: Product the cart line items refer to
            _banner("STEP 2: SETUP PRODUCT")
            product_id = self._setup_product(client, results)

            # Step 3: Scenario 1
            _banner("STEP 3: SCENARIO 1 - LINE ITEM ALREADY IN THE CART")
            cart = client.create_cart(CartDraft(
                currency=CURRENCY,
                country=COUNTRY,
                line_items=[LineItemDraft(product_id=product_id, quantity=self.cart_quantity)],
            ))
            handle = VersionHandle.from_response(cart)
            references = {
                LINE_ITEM_ID: extract(cart, FIRST_LINE_ITEM_ID_PATH),
                PRODUCT_ID: product_id,
            }
            results["steps"].append("create cart")
            results["cart"] = project_cart(cart)
            if sink:
                sink.save_json("given-cart", project_cart(cart))
            print(f"  Cart created: {handle.resource_id} (version {handle.version})")

            scenario_one = self._run_pipeline(
                client, handle, references, sink, results,
                existing_line_item_steps(self.addresses, self.cart_quantity, FIRST_ADDRESS_SHARE),
            )
            results["checks"]["scenario_1_shipping_target_total"] = self._target_total(scenario_one.last_response)

            # Step 4: Scenario 2 continues on the same cart and version
            _banner("STEP 4: SCENARIO 2 - MANAGING A LINE ITEM")
            scenario_two = self._run_pipeline(
                client, scenario_one.handle, scenario_one.references, sink, results,
                managed_line_item_steps(
                    [a.key for a in self.addresses], self.cart_quantity, FIRST_ADDRESS_SHARE,
                ),
            )
            results["checks"]["scenario_2_shipping_target_total"] = self._target_total(scenario_two.last_response)

            results["success"] = True

        except Exception as e:
            results["error"] = str(e)
            results["status_code"] = getattr(e, "status_code", None)
            if isinstance(e, PipelineAbortedError):
                results["failed_step"] = e.step_name
            print(f"\n  ERROR: {e}")
            if self.debug:
                import traceback
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        if sink and self.output_manager.current_dir:
            results["artifacts_dir"] = self.output_manager.current_dir

        if sink:
            results_path = sink.save_json("scenario_results", results)
            if results_path:
                print(f"\n  Results saved to: {results_path}")

        return results

    def _setup_product(self, client: CommercetoolsClient, results: Dict[str, Any]) -> str:
        product_type = client.create_product_type(
            ProductTypeDraft(name=f"productType{_random_suffix()}", description="productType")
        )
        product_type_id = extract(product_type, "id")
        results["steps"].append("create product type")
        print(f"  Product type: {product_type_id}")

        rate = TaxRateDraft(
            name=TAX_RATE["name"],
            amount=TAX_RATE["amount"],
            included_in_price=TAX_RATE["includedInPrice"],
            country=TAX_RATE["country"],
        )
        tax_category = client.create_tax_category(
            TaxCategoryDraft(name=f"taxCat{_random_suffix()}", rates=[rate])
        )
        tax_category_id = extract(tax_category, "id")
        results["steps"].append("create tax category")
        print(f"  Tax category: {tax_category_id}")

        product = client.create_product(ProductDraft(
            product_type_id=product_type_id,
            tax_category_id=tax_category_id,
            name={LOCALE: "product"},
            slug={LOCALE: f"product{_random_suffix()}"},
            currency_code=CURRENCY,
            cent_amount=PRODUCT_CENT_AMOUNT,
        ))
        product_id = extract(product, "id")
        results["steps"].append("create product")
        print(f"  Product: {product_id}")
        return product_id

    def _run_pipeline(self, client, handle, references, sink, results, steps: List):
        pipeline = VersionedMutationPipeline(
            client.update_cart,
            handle,
            references=references,
            sink=sink,
            project=project_cart,
            debug=self.debug,
        )
        try:
            result = pipeline.run(steps)
        finally:
            results["steps"].extend(pipeline.completed_steps)
        for name in result.completed_steps:
            print(f"  {name}: done")
        print(f"  Cart {result.handle.resource_id} now at version {result.handle.version}")
        results["cart"] = project_cart(result.last_response)
        return result

    @staticmethod
    def _target_total(cart: Dict[str, Any]) -> Dict[str, int]:
        """Line item id -> sum of its shipping target quantities."""
        return {
            item["id"]: shipping_target_total(item)
            for item in (cart or {}).get("lineItems") or []
        }

    def print_summary(self, results: Dict):
        """Print a human-readable execution summary.

        Args:
            results: The dict returned by run().
        """
        _banner("SCENARIOS COMPLETE" if results.get("success") else "SCENARIOS FAILED")
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")
        print(f"Steps completed: {len(results.get('steps', []))}")

        cart = results.get("cart")
        if cart:
            print(f"Cart: {cart.get('id')} (version {cart.get('version')})")
            for item in cart.get("lineItems", []):
                print(f"  Line item {item['id']}: quantity {item['quantity']}, "
                      f"shipping targets {shipping_target_total(item)}")

        if results.get("artifacts_dir"):
            print(f"Snapshots: {results['artifacts_dir']}")

        if results.get("error"):
            if results.get("failed_step"):
                print(f"Failed step: {results['failed_step']}")
            if results.get("status_code") is not None:
                print(f"Status code: {results['status_code']}")
            print(f"Error: {results['error']}")
