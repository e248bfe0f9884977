"""
Use case: Mint an NFT for an audited report.

Input: MintNftCommand (audit_id, wallet_address, metadata_uri)
Output: WorkflowResult[MintReceipt]
Side effects: one call to the minting service.
Failure cases:
    AuditVerified  NotFound, or ValidationFailed when the audit did not pass.
    NftMinted      Minting service failures are reported once, never retried.
"""

import logging
from functools import partial

from recy.application.audit.dtos import MintNftCommand
from recy.application.audit.steps import AUDIT_VERIFIED, verify_audit_step
from recy.application.workflow import Workflow, WorkflowResult, WorkflowStep
from recy.domain.audit.entities import AuditRecord, MintReceipt, MintRequest
from recy.domain.audit.ports import AuditRepository, MintingPort

logger = logging.getLogger(__name__)

NFT_MINTED = "NftMinted"


class MintNftUseCase:
    """Triggers minting for an audit that passed.

    The minting service is the terminal step; nothing runs after it.
    """

    def __init__(self, audit_repo: AuditRepository, minting_port: MintingPort) -> None:
        self._audit_repo = audit_repo
        self._minting_port = minting_port

    def execute(self, command: MintNftCommand) -> WorkflowResult[MintReceipt]:
        logger.info("Minting NFT for audit=%s", command.audit_id)
        workflow: Workflow[MintReceipt] = Workflow(
            name="mint-nft",
            steps=[
                verify_audit_step(self._audit_repo, command.audit_id, require_audited=True),
                WorkflowStep(name=NFT_MINTED, effect=partial(self._mint, command)),
            ],
        )
        return workflow.run()

    def _mint(self, command: MintNftCommand, results) -> MintReceipt:
        audit: AuditRecord = results[AUDIT_VERIFIED]
        return self._minting_port.mint(
            MintRequest(
                audit_id=audit.id,
                wallet_address=command.wallet_address,
                metadata_uri=command.metadata_uri,
            )
        )
