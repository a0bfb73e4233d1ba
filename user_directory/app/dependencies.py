from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from user_directory.app.core.access_policy import AccessPolicy, build_access_policy
from user_directory.app.core.config import Settings, settings as default_settings
from user_directory.services.accounts import AccountService, BcryptPasswordHasher, JsonRecordStore
from user_directory.services.media import CloudinaryConfig, CloudinaryMediaStore, mask_secret

logger = logging.getLogger(__name__)


@dataclass
class AppDependencies:
    record_store: JsonRecordStore
    password_hasher: BcryptPasswordHasher
    media_store: Optional[CloudinaryMediaStore]
    account_service: AccountService
    access_policy: AccessPolicy


def cloudinary_config_from_settings(cfg: Settings) -> CloudinaryConfig:
    return CloudinaryConfig(
        cloud_name=cfg.CLOUDINARY_CLOUD_NAME,
        api_key=cfg.CLOUDINARY_API_KEY,
        api_secret=cfg.CLOUDINARY_API_SECRET,
        folder=cfg.CLOUDINARY_FOLDER,
        api_base=cfg.CLOUDINARY_API_BASE,
        timeout_s=cfg.CLOUDINARY_TIMEOUT_S,
        max_width=cfg.IMAGE_MAX_WIDTH,
        max_height=cfg.IMAGE_MAX_HEIGHT,
    )


def create_dependencies(db_path: str | None = None, cfg: Settings | None = None) -> AppDependencies:
    cfg = cfg or default_settings

    record_store = JsonRecordStore(db_path=db_path)
    hasher = BcryptPasswordHasher(rounds=cfg.BCRYPT_ROUNDS)

    cloudinary_cfg = cloudinary_config_from_settings(cfg)
    media_store = CloudinaryMediaStore(cloudinary_cfg)
    logger.info(
        "Cloudinary config: cloud_name=%s api_key=%s api_secret=%s",
        cloudinary_cfg.cloud_name or "not set",
        mask_secret(cloudinary_cfg.api_key),
        mask_secret(cloudinary_cfg.api_secret),
    )
    if not cloudinary_cfg.configured:
        logger.warning("Cloudinary is not configured; uploads will fail and pictures will not be released")

    account_service = AccountService(store=record_store, hasher=hasher, media_store=media_store)

    return AppDependencies(
        record_store=record_store,
        password_hasher=hasher,
        media_store=media_store,
        account_service=account_service,
        access_policy=build_access_policy(cfg.ADMIN_ACCESS_MODE),
    )
