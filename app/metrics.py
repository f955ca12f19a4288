from prometheus_client import Counter, Histogram

METRIC_PREFIX = 'backend_'

backend_attempt_metrics_label_names = [
    'exercise_type',
]
BACKEND_ATTEMPT_METRICS = {
    'started': Counter(
        METRIC_PREFIX + 'exercise_attempt_started_total',
        'Total number of exercise attempts started by students',
        labelnames=backend_attempt_metrics_label_names,
    ),
    'resumed': Counter(
        METRIC_PREFIX + 'exercise_attempt_resumed_total',
        'Total number of in-progress attempts resumed by students',
        labelnames=backend_attempt_metrics_label_names,
    ),
    'answers': Counter(
        METRIC_PREFIX + 'exercise_answer_total',
        'Total number of item answers submitted by students',
        labelnames=backend_attempt_metrics_label_names,
    ),
    'incorrect_answers': Counter(
        METRIC_PREFIX + 'exercise_answer_error_total',
        'Total number of incorrect item answers submitted by students',
        labelnames=backend_attempt_metrics_label_names,
    ),
    'evaluation_time': Histogram(
        METRIC_PREFIX + 'exercise_answer_evaluation_time_seconds',
        "Time spent grading a student's answer",
        labelnames=backend_attempt_metrics_label_names,
        buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
    ),
    'completed': Counter(
        METRIC_PREFIX + 'exercise_attempt_completed_total',
        'Total number of exercise attempts finalized',
        labelnames=backend_attempt_metrics_label_names + ['outcome'],
    ),
    'abandoned': Counter(
        METRIC_PREFIX + 'exercise_attempt_abandoned_total',
        'Total number of exercise attempts abandoned by students',
        labelnames=backend_attempt_metrics_label_names,
    ),
    'timed_out': Counter(
        METRIC_PREFIX + 'exercise_attempt_timed_out_total',
        'Total number of attempts force-completed by the time limit',
        labelnames=backend_attempt_metrics_label_names,
    ),
    'percentage': Histogram(
        METRIC_PREFIX + 'exercise_attempt_percentage',
        'Final percentage of completed exercise attempts',
        labelnames=backend_attempt_metrics_label_names,
        buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
    ),
}
