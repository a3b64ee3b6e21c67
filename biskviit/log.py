import logging

jar_logger = logging.getLogger("biskviit.jar")
internal_logger = logging.getLogger("biskviit.internal")
