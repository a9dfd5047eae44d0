import sys
import traceback
import logging

from knn_framework.core.error_handling.error_handler import ErrorHandler
from .di_container import ModelTestingDIContainer


def main() -> None:
    """Main function to tune and test the nearest-neighbor classifier."""
    app_logger = None
    try:
        # Initialize container
        container = ModelTestingDIContainer()

        # Get core dependencies
        config = container.config()
        app_logger = container.app_logger()

        # Initialize the app logger
        app_logger.setup(config.core.app_logging_config.model_testing_log_file)

        data_access = container.data_access()
        model_tester = container.model_tester()

        dataset = data_access.load_dataset()

        app_logger.structured_log(
            logging.INFO,
            "Data loaded",
            n_examples=len(dataset),
            n_features=dataset.n_features,
            classes=[str(label) for label in dataset.classes]
        )

        result = model_tester.run_workflow(dataset)

        for point in result.tuning_curve:
            app_logger.structured_log(
                logging.INFO,
                "Tuning curve point",
                k=point.k,
                mean_accuracy=point.mean_accuracy,
                standard_error=point.standard_error
            )

        results_path = data_access.save_results(result.summarize(), config.results_file)
        curve_path = data_access.save_dataframe(result.tuning_curve.to_frame(), config.tuning_curve_file)

        app_logger.structured_log(
            logging.INFO,
            "Model testing completed successfully",
            selected_k=result.selected_k,
            test_accuracy=result.holdout.accuracy,
            confusion_matrix=result.holdout.confusion_matrix.counts,
            results_file=results_path,
            tuning_curve_file=curve_path
        )

    except ErrorHandler as e:
        # Already logged when it was created
        sys.exit(e.exit_code)
    except Exception as e:
        if app_logger is not None and app_logger.logger is not None:
            app_logger.structured_log(
                logging.ERROR,
                "Model testing failed",
                error=str(e),
                traceback=traceback.format_exc()
            )
        else:
            # Fallback to basic logging if the logger was not initialized
            print(f"ERROR: Model testing failed: {str(e)}")
            print(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
