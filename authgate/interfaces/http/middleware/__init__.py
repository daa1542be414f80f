# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .request_gate import RequestGate, current_subject, extract_bearer_token

__all__ = ["RequestGate", "current_subject", "extract_bearer_token"]
