# canteen/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from sqlalchemy.exc import IntegrityError, OperationalError


def db_connect_retry():
    #baza moze jeszcze wstawac razem z kontenerem aplikacji
    return retry(
        reraise=True,
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(OperationalError),
    )


def unique_conflict_retry():
    #rownolegly insert tej samej linii koszyka - ponow po rollbacku
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(IntegrityError),
    )
