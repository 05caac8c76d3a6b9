"""Native credential path adapters"""

from wallet_selector.adapter.output.native.defer_to_caller import DeferToCallerNativePath

__all__ = ["DeferToCallerNativePath"]
