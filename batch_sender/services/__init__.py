# batch_sender/services/__init__.py
from .outcome_store import OutcomeStore, Summary, AttemptRecord
from .dispatch_sequencer import DispatchSequencer, DispatchState, DispatchReport
