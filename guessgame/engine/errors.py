ERR_BUSY = "BUSY"                    # another tick is still being processed
ERR_NO_LABEL = "NO_LABEL"            # classifier had no prediction this tick
ERR_UNRECOGNIZED = "UNRECOGNIZED"    # label is not one of higher / lower / stop
ERR_ROUND_OVER = "ROUND_OVER"        # number already found, waiting for reset
ERR_VISION = "VISION_ERROR"          # camera or classifier raised
ERR_UNKNOWN = "UNKNOWN"
