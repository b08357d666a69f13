from typing import Optional, Protocol

class AppHooks(Protocol):
    """
    Protocol for application hooks to follow the conversion.
    This can be implemented by the main application to show progress
    or to stop between conversion stages.

    Methods:
        report_step(info, target, reset_counter, plus_step) -> None:
            Report progress of the current stage.
        stop_requested() -> bool:
            Whether the user asked to stop.
    """
    def report_step(self, info: str = "", target: Optional[int] = None, reset_counter: bool = False, plus_step: int = 1) -> None:
        """
        Report progress messages from the conversion.

        Args:
            info (str): Progress message.
            target (int): Number of steps in the stage, if known.
            reset_counter (bool): Start counting from zero.
            plus_step (int): Steps completed since the last report.
        """
        pass

    def stop_requested(self) -> bool:
        """
        Check if a stop has been requested by the user.

        Returns:
            bool: True if stop is requested, False otherwise.
        """
        return False


def report_step(app_hooks: Optional[AppHooks], logger, info: str = "", target: Optional[int] = None,
                reset_counter: bool = False, plus_step: int = 0) -> None:
    """
    Report a step via app hooks if available, else log it.
    """
    if app_hooks and callable(getattr(app_hooks, "report_step", None)):
        app_hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
    elif info:
        logger.info(info)


def stop_requested(app_hooks: Optional[AppHooks], logger, logger_stop_message: str = "Stop requested by user") -> bool:
    if app_hooks and callable(getattr(app_hooks, "stop_requested", None)):
        if app_hooks.stop_requested():
            if logger_stop_message:
                logger.debug(logger_stop_message)
            return True
    return False
