from pyspark import SparkConf, SparkContext


def initialize_spark(app_name="SparkApriori", master="local[*]", log_level="ERROR"):
    """
    Initialize (or reuse) the Spark context.

    Args:
        app_name: Name of the Spark application
        master: Spark master URL
        log_level: Spark log level for the driver

    Returns:
        SparkContext
    """
    conf = SparkConf().setAppName(app_name).setMaster(master)
    sc = SparkContext.getOrCreate(conf=conf)
    sc.setLogLevel(log_level)
    return sc
