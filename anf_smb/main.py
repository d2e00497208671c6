from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from contextlib import AbstractAsyncContextManager
from typing import Callable, Optional, Sequence

from anf_smb.services.config import AzureAuthConfig, SampleConfig
from anf_smb.services.dependencies import get_smb_volume_setup_service, open_netapp_service
from anf_smb.services.errors import ConfigurationLoadFailed, ValidationError, WorkflowError
from anf_smb.services.netapp_service import NetAppService
from anf_smb.services.prompt import get_password


logger = logging.getLogger(__name__)

HEADER = (
    "Azure NetAppFiles Python SMB SDK Sample - sample application that creates an SMB volume "
    "together with Account and Capacity Pool."
)
PASSWORD_PROMPT = (
    "Please type Active Directory's user password that will domain join ANF's SMB server and press [ENTER]:"
)


def _ensure_logging() -> None:
    formatter = logging.Formatter("%(levelname)s: %(message)s")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    else:
        root.setLevel(logging.INFO)
        for handler in root.handlers:
            handler.setFormatter(formatter)


def _log_header(text: str) -> None:
    logger.info(text)
    logger.info("-" * len(text))


def _log_failure(exc: BaseException) -> None:
    logger.error("%s", exc)
    # A failed teardown masks the provisioning error that triggered it.
    previous = exc.__context__
    while previous is not None and not isinstance(previous, WorkflowError):
        previous = previous.__context__
    if previous is not None:
        logger.error("%s", previous)


async def run_sample(
    config: SampleConfig,
    *,
    password_prompt: Callable[[str], str] = get_password,
    auth_loader: Callable[[], AzureAuthConfig] = AzureAuthConfig.from_env,
    service_factory: Callable[[AzureAuthConfig], AbstractAsyncContextManager[NetAppService]] = open_netapp_service,
) -> int:
    """Run the whole sample and return the process exit code (0 or 1)."""

    _log_header(HEADER)

    try:
        password = await asyncio.to_thread(password_prompt, PASSWORD_PROMPT)

        auth = auth_loader()

        async with service_factory(auth) as netapp:
            setup = get_smb_volume_setup_service(netapp=netapp, config=config, auth=auth)
            async with setup.provisioned(password=password) as resources:
                if resources.mount_targets:
                    logger.info("\t====> SMB Server FQDN: %s", resources.smb_server_fqdn)
    except (ValidationError, ConfigurationLoadFailed, WorkflowError) as exc:
        _log_failure(exc)
        return 1
    except Exception:
        logger.exception("Unexpected error while running the sample")
        return 1

    return 0


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="anf-smb-sample",
        description="Create an Azure NetApp Files SMB volume with its account and capacity pool.",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        default=None,
        help="Delete the volume, capacity pool and account before exiting (overrides ANF_SHOULD_CLEAN_UP).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    _ensure_logging()

    try:
        config = SampleConfig.from_env(should_clean_up=args.cleanup)
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    return asyncio.run(run_sample(config))


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
