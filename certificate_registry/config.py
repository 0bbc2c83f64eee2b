# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Configuration definition and collector of default values."""

import os
from typing import Annotated

from fastapi import Depends

import common.config as conf


class RegistryConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Certificate Registry")

        self.max_bulk_entries = int(os.getenv("MAX_BULK_ENTRIES", 500))
        '''Upper limit of certificates issued in a single bulk request'''


inject = Annotated[RegistryConfig, Depends(RegistryConfig)]
