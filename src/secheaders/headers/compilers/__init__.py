# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Header compilers: settings in, ``HeaderValue`` (or ``None``) out."""

from secheaders.headers.compilers.base import Compiler, total_compiler
from secheaders.headers.compilers.csp import compile_content_security_policy
from secheaders.headers.compilers.features import compile_feature_policy, compile_permissions_policy
from secheaders.headers.compilers.simple import (
    compile_content_type_options,
    compile_frame_options,
    compile_referrer_policy,
    compile_report_to,
    compile_strict_transport_security,
    compile_xss_protection,
)

__all__ = [
    "Compiler",
    "compile_content_security_policy",
    "compile_content_type_options",
    "compile_feature_policy",
    "compile_frame_options",
    "compile_permissions_policy",
    "compile_referrer_policy",
    "compile_report_to",
    "compile_strict_transport_security",
    "compile_xss_protection",
    "total_compiler",
]
