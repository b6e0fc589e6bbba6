from .orchestrator import ShippingScenarioOrchestrator
from .ctp_client import CommercetoolsClient
from .auth import ClientCredentialsAuth
from .pipeline import MutationStep, VersionHandle, VersionedMutationPipeline
from .output_manager import OutputManager
